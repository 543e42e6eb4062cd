"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from datetime import timedelta
from decimal import Decimal
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from settings.config import app_settings
from tables.store import table_store


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def reset_app_settings():
    """
    Forget cached GlobalSettings before each test.

    The AppSettings singleton outlives a test's database transaction, so a
    value loaded in one test would otherwise leak into the next.
    """
    app_settings.reset()
    yield
    app_settings.reset()


@pytest.fixture(autouse=True)
def clear_store_subscriptions():
    """
    Drop table store subscribers after each test so observers from one test
    never receive snapshots written by another.
    """
    yield
    table_store.clear_subscriptions()


@pytest.fixture(autouse=True)
def clear_cache_after_test():
    """
    Clear cache after each test to prevent cache pollution.
    """
    yield
    cache.clear()


# ============================================================================
# CATALOG FIXTURES
# ============================================================================

@pytest.fixture
def category_mains(db):
    from products.models import Category
    return Category.objects.create(name="Mains", order=1)


@pytest.fixture
def category_drinks(db):
    from products.models import Category
    return Category.objects.create(name="Drinks", order=2)


@pytest.fixture
def nasi_goreng(category_mains):
    from products.models import Food
    return Food.objects.create(
        category=category_mains,
        name="Nasi Goreng",
        description="Fried rice with egg",
        price=Decimal("100.00"),
    )


@pytest.fixture
def mie_goreng(category_mains):
    from products.models import Food
    return Food.objects.create(category=category_mains, name="Mie Goreng", price=Decimal("80.00"))


@pytest.fixture
def es_teh(category_drinks):
    from products.models import Food
    return Food.objects.create(category=category_drinks, name="Es Teh", price=Decimal("20.00"))


@pytest.fixture
def entire_order_discount(db):
    from discounts.models import Discount
    now = timezone.now()
    return Discount.objects.create(
        name="Happy Hour",
        scope=Discount.DiscountScope.ENTIRE_ORDER,
        percent=Decimal("10"),
        start_date=now - timedelta(days=1),
        expiration_date=now + timedelta(days=1),
    )


# ============================================================================
# STAFF & TABLE FIXTURES
# ============================================================================

@pytest.fixture
def staff_alice(db):
    from staff.models import StaffMember
    staff = StaffMember(name="Alice")
    staff.set_pin("1234")
    staff.save()
    return staff


@pytest.fixture
def staff_bob(db):
    from staff.models import StaffMember
    staff = StaffMember(name="Bob")
    staff.set_pin("5678")
    staff.save()
    return staff


@pytest.fixture
def table(db):
    from tables.models import TableRecord
    return TableRecord.objects.create(name="Table 1")


@pytest.fixture
def builder(table):
    """An Order Builder subscribed to `table`, nobody logged in."""
    from orders.services import OrderBuilder
    order_builder = OrderBuilder(table.pk).open()
    yield order_builder
    order_builder.close()


@pytest.fixture
def logged_in_builder(builder, staff_alice):
    """An Order Builder with Alice logged in through the PIN gate."""
    builder.session.select_staff(staff_alice, table=builder.table)
    builder.session.submit_pin("1234")
    return builder


@pytest.fixture
def serving_table(logged_in_builder, nasi_goreng, table):
    """`table` with one saved line, queued for the kitchen."""
    logged_in_builder.add_item(nasi_goreng)
    logged_in_builder.save_order()
    table.refresh_from_db()
    return table


@pytest.fixture
def api_client():
    return APIClient()
