import pytest

from storefront.data.models import CartItemModel
from storefront.domain.errors import PersistenceError
from storefront.repos.upsert import upsert_stmt


def test_unknown_dialect_names_itself():
    with pytest.raises(PersistenceError, match="oracle"):
        upsert_stmt(
            CartItemModel,
            "oracle",
            values={"user_id": 1, "product_id": 1, "quantity": 1},
            keys=["user_id", "product_id"],
            update={"quantity": lambda existing, incoming: existing + incoming},
        )


@pytest.mark.parametrize("dialect", ["sqlite", "postgresql", "mysql"])
def test_known_dialects_build_a_statement(dialect):
    stmt = upsert_stmt(
        CartItemModel,
        dialect,
        values={"user_id": 1, "product_id": 1, "quantity": 1},
        keys=["user_id", "product_id"],
        update={"quantity": lambda existing, incoming: existing + incoming},
    )
    assert stmt is not None
