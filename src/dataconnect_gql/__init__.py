"""Data Connect GQL - GraphQL operation and schema scanning for code generation."""

from dataconnect_gql.codegen import (
    CodegenResult,
    ConnectorConfig,
    ConnectorConfigError,
    SdkTarget,
    codegen_for_saved_file,
    find_connector_yaml,
    load_connector_config,
    run_codegen,
)
from dataconnect_gql.parsing import (
    Field,
    GraphQLParser,
    NestedFieldRegistry,
    Operation,
    OperationKind,
    TypeDefinition,
    Variable,
)

__all__ = [
    # Main API
    "GraphQLParser",
    # Parsed records
    "Operation",
    "OperationKind",
    "Variable",
    "Field",
    "TypeDefinition",
    "NestedFieldRegistry",
    # Code generation
    "ConnectorConfig",
    "ConnectorConfigError",
    "SdkTarget",
    "CodegenResult",
    "find_connector_yaml",
    "load_connector_config",
    "run_codegen",
    "codegen_for_saved_file",
]

__version__ = "0.1.0"
