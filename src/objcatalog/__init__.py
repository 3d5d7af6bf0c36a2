import logging

from pydantic import __version__ as _pydantic_version

# objcatalog relies on the Pydantic v2 API (model_config, model_fields, etc.).
# Import errors should surface early if an incompatible version is installed.
if not _pydantic_version.startswith("2"):
    raise ImportError(
        "objcatalog requires pydantic>=2.0; detected version %s" % _pydantic_version
    )

from .errors import (
    CatalogError,
    DuplicateRelationError,
    MemberAccessError,
    NotEnumerableError,
    UnsupportedConversionError,
)
from .expressions import (
    ConstantExpression,
    Expression,
    Expressions,
    FieldExpression,
    MethodCallExpression,
    ParameterExpression,
)
from .linq import Enumerable, Enumerator, as_enumerable, to_enumerable, to_enumerator
from .protocols import Parameter, QueryProvider, Table, TableFunction
from .schema import (
    FieldTable,
    MapSchema,
    MethodParameter,
    MethodTable,
    MethodTableFunction,
    ReflectiveSchema,
    describe_members,
    root_schema,
)
from .settings import CatalogSettings, load_settings
from .types import (
    PythonTypeFactory,
    RelDataType,
    RelDataTypeField,
    SqlTypeName,
    TypeFactory,
    deduce_element_type,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # errors
    "CatalogError",
    "DuplicateRelationError",
    "MemberAccessError",
    "NotEnumerableError",
    "UnsupportedConversionError",
    # expressions
    "Expression",
    "Expressions",
    "ConstantExpression",
    "FieldExpression",
    "MethodCallExpression",
    "ParameterExpression",
    # enumeration
    "Enumerable",
    "Enumerator",
    "as_enumerable",
    "to_enumerable",
    "to_enumerator",
    # protocols
    "Parameter",
    "QueryProvider",
    "Table",
    "TableFunction",
    # schemas
    "MapSchema",
    "ReflectiveSchema",
    "FieldTable",
    "MethodTable",
    "MethodTableFunction",
    "MethodParameter",
    "describe_members",
    "root_schema",
    # settings
    "CatalogSettings",
    "load_settings",
    # types
    "PythonTypeFactory",
    "RelDataType",
    "RelDataTypeField",
    "SqlTypeName",
    "TypeFactory",
    "deduce_element_type",
]
