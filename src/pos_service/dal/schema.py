"""
Schema creation and seed data for the POS store.

The schema is a static DDL blob applied statement by statement. Every
statement is ``CREATE TABLE IF NOT EXISTS`` and every seed insert is
``ON CONFLICT DO NOTHING``, so applying both again is harmless. The blob is
written for PostgreSQL; auto-increment ids, generated session ids and
timestamp defaults are rendered per dialect so the same tables exist on
SQLite.

A process-wide ``SchemaInitializer`` applies schema and seed once per Lambda
container; warm invocations skip straight to their own query.
"""

import json
import threading
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pos_service.dal import DalHandler, get_dal_handler
from pos_service.handlers.utils.observability import add_count_metric, logger, tracer

STATEMENT_TERMINATOR = ';'

SCHEMA_TEMPLATE = """
CREATE TABLE IF NOT EXISTS business_settings (
    id {serial_pk},
    "businessName" TEXT,
    "taxRate" NUMERIC,
    phone TEXT,
    address TEXT,
    "taxId" TEXT,
    currency TEXT,
    "defaultDisplayCurrency" TEXT,
    "logoUrl" TEXT,
    "receiptHeaderText" TEXT,
    "receiptFooterText" TEXT,
    "receiptShowPhone" BOOLEAN,
    "receiptShowAddress" BOOLEAN,
    "receiptShowTaxId" BOOLEAN,
    "currencyRatesLastUpdated" TIMESTAMPTZ
);

CREATE TABLE IF NOT EXISTS app_settings (
    id INT PRIMARY KEY,
    theme TEXT DEFAULT 'default',
    language TEXT DEFAULT 'es'
);

CREATE TABLE IF NOT EXISTS currencies (
    code TEXT PRIMARY KEY,
    name TEXT,
    symbol TEXT,
    rate NUMERIC
);

CREATE TABLE IF NOT EXISTS roles (
    id TEXT PRIMARY KEY,
    name TEXT,
    "descriptionKey" TEXT,
    permissions JSONB
);

CREATE TABLE IF NOT EXISTS users (
    id {serial_pk},
    name TEXT,
    "roleId" TEXT REFERENCES roles(id),
    username TEXT UNIQUE,
    password TEXT,
    pin TEXT,
    "avatarUrl" TEXT,
    status TEXT,
    "lastLogin" TIMESTAMPTZ,
    deleted_at TIMESTAMPTZ
);

CREATE TABLE IF NOT EXISTS products (
    id {serial_pk},
    name TEXT,
    price JSONB,
    "purchasePrice" JSONB,
    "imageUrl" TEXT,
    category TEXT,
    stock NUMERIC,
    "sellBy" TEXT
);

CREATE TABLE IF NOT EXISTS suppliers (
    id {serial_pk},
    name TEXT,
    "contactPerson" TEXT,
    phone TEXT,
    email TEXT,
    address TEXT,
    notes TEXT
);

CREATE TABLE IF NOT EXISTS customers (
    id {serial_pk},
    name TEXT,
    phone TEXT,
    email TEXT,
    address TEXT,
    notes TEXT,
    "createdAt" TIMESTAMPTZ DEFAULT {now}
);

CREATE TABLE IF NOT EXISTS purchase_orders (
    id TEXT PRIMARY KEY,
    "supplierId" INTEGER REFERENCES suppliers(id),
    "supplierName" TEXT,
    date TEXT,
    items JSONB,
    "totalCost" NUMERIC,
    status TEXT
);

CREATE TABLE IF NOT EXISTS completed_orders (
    "invoiceId" TEXT PRIMARY KEY,
    date TEXT,
    cashier TEXT,
    items JSONB,
    subtotal NUMERIC,
    tax NUMERIC,
    tip NUMERIC,
    discount NUMERIC,
    total NUMERIC,
    "paymentMethod" TEXT,
    status TEXT,
    "refundAmount" NUMERIC,
    "customerId" INTEGER,
    "customerName" TEXT
);

CREATE TABLE IF NOT EXISTS refund_transactions (
    id TEXT PRIMARY KEY,
    "originalInvoiceId" TEXT,
    date TEXT,
    cashier TEXT,
    items JSONB,
    "totalRefundAmount" NUMERIC,
    "stockRestored" BOOLEAN
);

CREATE TABLE IF NOT EXISTS session_history (
    id {serial_pk},
    "isOpen" BOOLEAN,
    "startingCash" NUMERIC,
    "openedBy" TEXT,
    "openedAt" TEXT,
    activities JSONB,
    "closingCash" NUMERIC,
    difference NUMERIC,
    "closedBy" TEXT,
    "closedAt" TEXT
);

CREATE TABLE IF NOT EXISTS parked_orders (
    id TEXT PRIMARY KEY,
    name TEXT,
    items JSONB,
    "parkedAt" TEXT
);

CREATE TABLE IF NOT EXISTS auth_sessions (
    id TEXT PRIMARY KEY DEFAULT {session_id_default},
    user_id INTEGER REFERENCES users(id),
    created_at TIMESTAMPTZ DEFAULT {now},
    expires_at TIMESTAMPTZ
);

CREATE TABLE IF NOT EXISTS audit_logs (
    id {serial_pk},
    "timestamp" TIMESTAMPTZ DEFAULT {now},
    "userId" INTEGER,
    "userName" TEXT,
    action TEXT,
    details TEXT
);
"""

POSTGRESQL = 'postgresql'
SQLITE = 'sqlite'

# Column fragments that differ between the production store and SQLite
DIALECT_COLUMNS = {
    POSTGRESQL: {
        'serial_pk': 'SERIAL PRIMARY KEY',
        'session_id_default': '(gen_random_uuid()::text)',
        'now': 'NOW()',
    },
    SQLITE: {
        'serial_pk': 'INTEGER PRIMARY KEY',
        'session_id_default': '(lower(hex(randomblob(16))))',
        'now': 'CURRENT_TIMESTAMP',
    },
}


def render_schema(dialect: str = POSTGRESQL) -> str:
    """
    DDL blob for ``dialect``.

    Dialects other than SQLite get the PostgreSQL rendering.
    """
    return SCHEMA_TEMPLATE.format(**DIALECT_COLUMNS.get(dialect, DIALECT_COLUMNS[POSTGRESQL]))


SCHEMA_SQL = render_schema(POSTGRESQL)
SQLITE_SCHEMA_SQL = render_schema(SQLITE)

# Tables seeded with explicit SERIAL ids
SERIAL_SEEDED_TABLES = ['business_settings', 'users', 'products', 'suppliers']

ALL_PERMISSIONS = [
    'CAN_PROCESS_PAYMENTS',
    'CAN_VIEW_DASHBOARD_REPORTS',
    'CAN_VIEW_SALES_HISTORY',
    'CAN_VIEW_INVENTORY',
    'CAN_MANAGE_INVENTORY_STOCK_PRICES',
    'CAN_ADD_PRODUCTS',
    'CAN_EDIT_DELETE_PRODUCTS',
    'CAN_PERFORM_STOCK_COUNT',
    'CAN_MANAGE_SUPPLIERS_AND_POs',
    'CAN_MANAGE_USERS_AND_ROLES',
    'CAN_MANAGE_CUSTOMERS',
    'CAN_MANAGE_CASH_DRAWER',
    'CAN_MANAGE_BUSINESS_SETTINGS',
]

SEED_CURRENCIES = [
    {'code': 'USD', 'name': 'US Dollar', 'symbol': '$', 'rate': 1},
    {'code': 'EUR', 'name': 'Euro', 'symbol': '€', 'rate': 0.93},
    {'code': 'MXN', 'name': 'Mexican Peso', 'symbol': '$', 'rate': 18.10},
    {'code': 'CLP', 'name': 'Chilean Peso', 'symbol': 'CLP', 'rate': 930.00},
    {'code': 'Bs', 'name': 'Venezuelan Bolívar', 'symbol': 'Bs', 'rate': 36.42},
]

SEED_ROLES = [
    {
        'id': 'admin',
        'name': 'Admin',
        'descriptionKey': 'roles.adminDescription',
        'permissions': ALL_PERMISSIONS,
    },
    {
        'id': 'cashier',
        'name': 'Cashier',
        'descriptionKey': 'roles.cashierDescription',
        'permissions': ['CAN_PROCESS_PAYMENTS', 'CAN_VIEW_INVENTORY', 'CAN_MANAGE_CASH_DRAWER'],
    },
]

SEED_USERS = [
    {
        'id': 1, 'name': 'Admin', 'roleId': 'admin', 'username': 'admin', 'password': 'admin123',
        'pin': '1234', 'avatarUrl': 'https://i.pravatar.cc/150?u=admin', 'status': 'active',
    },
    {
        'id': 2, 'name': 'Jane Smith', 'roleId': 'cashier', 'username': 'jane', 'password': 'password',
        'pin': '5678', 'avatarUrl': 'https://i.pravatar.cc/150?u=jane', 'status': 'active',
    },
]

SEED_PRODUCTS = [
    {
        'id': 1, 'name': 'Espresso', 'category': 'Coffee', 'stock': 50, 'sellBy': 'unit',
        'price': {'USD': 2.50, 'MXN': 45.00, 'CLP': 2300},
        'purchasePrice': {'USD': 1.20, 'MXN': 22.00, 'CLP': 1100},
        'imageUrl': 'https://picsum.photos/id/225/400/300',
    },
    {
        'id': 2, 'name': 'Latte', 'category': 'Coffee', 'stock': 50, 'sellBy': 'unit',
        'price': {'USD': 3.50, 'MXN': 65.00, 'CLP': 3200},
        'purchasePrice': {'USD': 1.50, 'MXN': 28.00, 'CLP': 1400},
        'imageUrl': 'https://picsum.photos/id/312/400/300',
    },
    {
        'id': 3, 'name': 'Cappuccino', 'category': 'Coffee', 'stock': 45, 'sellBy': 'unit',
        'price': {'USD': 3.50, 'MXN': 65.00, 'CLP': 3200},
        'purchasePrice': {'USD': 1.50, 'MXN': 28.00, 'CLP': 1400},
        'imageUrl': 'https://picsum.photos/id/326/400/300',
    },
    {
        'id': 7, 'name': 'Croissant', 'category': 'Pastries', 'stock': 30, 'sellBy': 'unit',
        'price': {'USD': 2.75, 'MXN': 50.00, 'CLP': 2500},
        'purchasePrice': {'USD': 1.10, 'MXN': 20.00, 'CLP': 1000},
        'imageUrl': 'https://picsum.photos/id/204/400/300',
    },
    {
        'id': 15, 'name': 'Colombian Coffee Beans', 'category': 'Coffee Beans', 'stock': 15.5, 'sellBy': 'weight',
        'price': {'USD': 22.00, 'MXN': 400.00, 'CLP': 20000},
        'purchasePrice': {'USD': 10.50, 'MXN': 190.00, 'CLP': 9500},
        'imageUrl': 'https://picsum.photos/id/225/400/300',
    },
]

SEED_SUPPLIERS = [
    {
        'id': 1, 'name': 'Supreme Coffee Roasters', 'contactPerson': 'Sarah Chen', 'phone': '555-0101',
        'email': 'sarah.c@supremecoffee.com', 'address': '123 Roast St, Bean Town',
        'notes': 'Weekly delivery on Tuesdays',
    },
    {
        'id': 2, 'name': 'Patisserie Deluxe', 'contactPerson': 'Pierre Dubois', 'phone': '555-0102',
        'email': 'orders@patisseriedeluxe.com', 'address': '45 Flour Ln, Pastryville', 'notes': '',
    },
]

SEED_BUSINESS_SETTINGS = {
    'businessName': 'Gemini Coffee Co.',
    'taxRate': 0.08,
    'phone': '555-123-4567',
    'address': '123 Gemini Way, Silicon Valley, CA 94043',
    'taxId': 'US-123456789',
    'currency': 'USD',
    'logoUrl': 'https://picsum.photos/seed/logo/200/100',
    'receiptHeaderText': 'Thanks for visiting Gemini Coffee Co.!',
    'receiptFooterText': 'Find us online @ geminicoffee.dev',
    'receiptShowAddress': True,
    'receiptShowPhone': True,
    'receiptShowTaxId': False,
}


def split_statements(sql_text: str) -> List[str]:
    """
    Split a DDL blob into individual statements.

    Fragments that are empty after trimming whitespace are dropped; the rest
    keep their source order.
    """
    fragments = (fragment.strip() for fragment in sql_text.split(STATEMENT_TERMINATOR))
    return [fragment for fragment in fragments if fragment]


def _quoted_columns(row: Dict[str, Any]) -> str:
    return ', '.join(f'"{column}"' for column in row)


def _placeholders(row: Dict[str, Any]) -> str:
    return ', '.join(f':{column}' for column in row)


def _insert_ignoring_conflicts(dal: DalHandler, table: str, conflict_column: str, row: Dict[str, Any]) -> int:
    """Insert ``row`` unless a row with the same ``conflict_column`` already exists."""
    statement = (
        f'INSERT INTO {table} ({_quoted_columns(row)}) VALUES ({_placeholders(row)}) '
        f'ON CONFLICT ("{conflict_column}") DO NOTHING'
    )
    return dal.execute(statement, row)


class SchemaState(str, Enum):
    """Whether schema and seed data have been applied in this process."""

    UNINITIALIZED = 'UNINITIALIZED'
    INITIALIZED = 'INITIALIZED'


class SchemaInitializer:
    """Applies the POS schema and seed data against a DAL handler."""

    def __init__(self, dal: DalHandler, schema_sql: Optional[str] = None) -> None:
        self.dal = dal
        self.schema_sql = schema_sql if schema_sql is not None else render_schema(dal.dialect_name)
        self.state = SchemaState.UNINITIALIZED
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self.state is SchemaState.INITIALIZED

    @tracer.capture_method
    def initialize_schema(self) -> int:
        """
        Execute every statement of the schema blob, in order.

        The first failing statement aborts the run and its ``StoreError``
        propagates; statements already applied stay applied.

        Returns:
            Number of statements executed
        """
        statements = split_statements(self.schema_sql)
        for index, statement in enumerate(statements):
            logger.debug("Applying schema statement", extra={"statement_index": index})
            self.dal.execute(statement)

        logger.info("Schema applied", extra={"statement_count": len(statements)})
        return len(statements)

    @tracer.capture_method
    def seed_initial_data(self) -> int:
        """
        Insert the reference data the POS needs to start.

        Every insert is a no-op when the row already exists, so this may run
        any number of times.

        Returns:
            Number of rows actually inserted
        """
        inserted = 0

        business_settings = {
            'id': 1,
            **SEED_BUSINESS_SETTINGS,
            'currencyRatesLastUpdated': (datetime.now(timezone.utc) - timedelta(days=1)).isoformat(),
        }
        inserted += _insert_ignoring_conflicts(self.dal, 'business_settings', 'id', business_settings)
        inserted += _insert_ignoring_conflicts(
            self.dal, 'app_settings', 'id', {'id': 1, 'theme': 'default', 'language': 'es'},
        )

        for currency in SEED_CURRENCIES:
            inserted += _insert_ignoring_conflicts(self.dal, 'currencies', 'code', currency)

        for role in SEED_ROLES:
            row = {**role, 'permissions': json.dumps(role['permissions'])}
            inserted += _insert_ignoring_conflicts(self.dal, 'roles', 'id', row)

        for user in SEED_USERS:
            inserted += _insert_ignoring_conflicts(self.dal, 'users', 'id', user)

        for product in SEED_PRODUCTS:
            row = {
                **product,
                'price': json.dumps(product['price']),
                'purchasePrice': json.dumps(product['purchasePrice']),
            }
            inserted += _insert_ignoring_conflicts(self.dal, 'products', 'id', row)

        for supplier in SEED_SUPPLIERS:
            inserted += _insert_ignoring_conflicts(self.dal, 'suppliers', 'id', supplier)

        if self.dal.dialect_name == POSTGRESQL:
            self._advance_serial_sequences()

        logger.info("Seed data applied", extra={"rows_inserted": inserted})
        return inserted

    def _advance_serial_sequences(self) -> None:
        """Move each seeded SERIAL sequence past the highest explicit id."""
        for table in SERIAL_SEEDED_TABLES:
            self.dal.execute(
                f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                f"COALESCE((SELECT MAX(id) FROM {table}), 1))"
            )

    def ensure_initialized(self) -> bool:
        """
        Apply schema and seed data once per process.

        Returns:
            True if this call performed the initialization, False if it was
            already done
        """
        if self.is_initialized:
            return False

        with self._lock:
            if self.is_initialized:
                return False

            self.initialize_schema()
            self.seed_initial_data()
            self.state = SchemaState.INITIALIZED

        add_count_metric("SchemaInitialized")
        logger.info("Database initialized for this process")
        return True


_schema_initializer: Optional[SchemaInitializer] = None


def get_schema_initializer() -> SchemaInitializer:
    """Get or create the process-wide schema initializer."""
    global _schema_initializer

    if _schema_initializer is None:
        _schema_initializer = SchemaInitializer(get_dal_handler())

    return _schema_initializer


def set_schema_initializer(initializer: Optional[SchemaInitializer]) -> None:
    """Replace the process-wide schema initializer (None resets to UNINITIALIZED)."""
    global _schema_initializer
    _schema_initializer = initializer


def ensure_db_initialized() -> bool:
    """Make sure the store has its schema and seed data before a query runs."""
    return get_schema_initializer().ensure_initialized()
