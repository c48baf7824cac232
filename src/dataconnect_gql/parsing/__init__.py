"""Parsing module for GraphQL operations and schema documents."""

from dataconnect_gql.parsing.graphql_parser import GraphQLParser, synthesize_type_name
from dataconnect_gql.parsing.models import (
    Field,
    NestedFieldRegistry,
    Operation,
    OperationKind,
    TypeDefinition,
    Variable,
)

__all__ = [
    "Field",
    "GraphQLParser",
    "NestedFieldRegistry",
    "Operation",
    "OperationKind",
    "TypeDefinition",
    "Variable",
    "synthesize_type_name",
]
