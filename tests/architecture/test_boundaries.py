import pytest
from pytest_archon import archrule

# Modules that turn request parameters into a QueryContext. They describe
# intent only and must stay free of the persistence layer.
PARSING_LAYER = [
    "crud_query.builder",
    "crud_query.config",
    "crud_query.context",
    "crud_query.decoders",
    "crud_query.descriptors",
    "crud_query.parser",
    "crud_query.predicates",
    "crud_query.resolver",
    "crud_query.utils",
]


@pytest.mark.parametrize("module", PARSING_LAYER)
def test_parsing_layer_does_not_import_sqlalchemy(module: str) -> None:
    """
    Decoding works on plain descriptors, so it can be tested and reused
    without a database driver or ORM.
    """
    (
        archrule("parsing_is_orm_free")
        .match(module)
        .should_not_import("sqlalchemy*")
        .check("crud_query", only_direct_imports=True)
    )


@pytest.mark.parametrize("module", PARSING_LAYER)
def test_parsing_layer_does_not_import_execution_layer(module: str) -> None:
    """The parsing layer must not reach SQLAlchemy through a sibling."""
    (
        archrule("parsing_is_execution_free")
        .match(module)
        .should_not_import("crud_query.catalog")
        .should_not_import("crud_query.compiler*")
        .should_not_import("crud_query.executor")
        .should_not_import("crud_query.registry")
        .should_not_import("crud_query.crud")
        .check("crud_query", only_direct_imports=True)
    )


def test_compiler_does_not_depend_on_execution() -> None:
    """
    The SQL compiler translates predicates; running statements belongs to
    the executor and the CRUD service.
    """
    (
        archrule("compiler_is_pure")
        .match("crud_query.compiler*")
        .should_not_import("crud_query.executor")
        .should_not_import("crud_query.crud")
        .should_not_import("crud_query.catalog")
        .check("crud_query", only_direct_imports=True)
    )


def test_executor_does_not_import_crud_service() -> None:
    (
        archrule("executor_below_crud")
        .match("crud_query.executor")
        .should_not_import("crud_query.crud")
        .check("crud_query", only_direct_imports=True)
    )
