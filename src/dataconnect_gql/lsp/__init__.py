"""Language server for Data Connect GraphQL documents."""
