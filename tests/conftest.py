import pytest
from decimal import Decimal
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.db.base import Base
from storefront.db.models import Product
from storefront.schemas.cart import CartOwner


DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    engine = create_async_engine(DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def product(db_session):
    product = Product(
        id="p1",
        name="Ceramic Basin",
        slug="ceramic-basin",
        image="/images/basin.jpg",
        price=Decimal("25.00"),
        stock=5
    )
    db_session.add(product)
    await db_session.commit()
    await db_session.refresh(product)
    return product


@pytest.fixture
async def second_product(db_session):
    product = Product(
        id="p2",
        name="Chrome Faucet",
        slug="chrome-faucet",
        image="/images/faucet.jpg",
        price=Decimal("50.00"),
        stock=10
    )
    db_session.add(product)
    await db_session.commit()
    await db_session.refresh(product)
    return product


@pytest.fixture
def owner():
    return CartOwner(session_cart_id="session-abc")


@pytest.fixture
def make_line():
    def _make_line(product, qty=1, price=None):
        return {
            "product_id": product.id,
            "name": product.name,
            "slug": product.slug,
            "image": product.image,
            "price": price if price is not None else f"{product.price:.2f}",
            "qty": qty,
        }
    return _make_line
