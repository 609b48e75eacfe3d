"""
Schema Introspector Integration Tests

Reads the real information_schema of the MySQL test database and runs the
generic repository against it. Skipped when TEST_DB_* is not configured.
"""

import os

import pytest

from database.exceptions import ConflictError, PersistenceError, SchemaError
from database.repositories.generic_repository import GenericRepository
from database.schema.metadata import ForeignKeyRef

pytestmark = pytest.mark.integration


class TestCatalogQuery:

    def test_columns_in_declaration_order(self, mysql_introspector):
        meta = mysql_introspector.load('products')

        assert meta.column_names == (
            'id', 'title', 'club', 'country', 'type', 'color',
            'price', 'offer_price', 'sku', 'category_id',
        )
        assert meta.primary_key == ('id',)
        assert meta.column('id').pk_type == 'simple'
        assert meta.column('id').is_auto_increment
        assert meta.column('title').max_length == 200

    def test_composite_primary_key(self, mysql_introspector):
        meta = mysql_introspector.load('product_size_stock')

        assert meta.has_composite_key
        assert meta.column('product_id').pk_type == 'composite'
        assert meta.column('size_id').pk_type == 'composite'
        assert meta.column('stock').pk_type is None

    def test_foreign_keys(self, mysql_introspector):
        classification = mysql_introspector.classify('product_size_stock')

        assert dict(classification.foreign_keys) == {
            'product_id': ForeignKeyRef('products', 'id'),
            'size_id': ForeignKeyRef('sizes', 'id'),
        }

    def test_references_to_excluded_tables_get_no_join(self, mysql_introspector):
        classification = mysql_introspector.classify('reservation_notes')

        assert set(classification.foreign_keys) == {'author_id', 'reviewer_id'}

    def test_enum_values(self, mysql_introspector):
        schema = mysql_introspector.schema('clients')

        assert schema.enum_columns() == {'category': ('Regular', 'Preferred')}

    def test_missing_table(self, mysql_introspector):
        with pytest.raises(SchemaError) as exc_info:
            mysql_introspector.load('orders')

        assert os.getenv('TEST_DB_NAME') in str(exc_info.value)


class TestClassificationAgainstMySQL:

    def test_clients(self, mysql_introspector):
        classification = mysql_introspector.classify('clients')

        assert classification.fillable == (
            'trade_name', 'tax_id', 'address', 'contact_name', 'contact_email', 'discount_percentage',
        )
        assert 'tax_id' not in classification.updatable
        assert 'category' not in classification.updatable
        assert classification.mandatory == ('trade_name', 'tax_id', 'discount_percentage')

    def test_users(self, mysql_introspector):
        classification = mysql_introspector.classify('users')

        assert 'active' not in classification.fillable
        assert 'registered_at' not in classification.fillable
        assert 'registered_at' not in classification.updatable
        assert 'active' in classification.updatable
        assert classification.mandatory == ('first_name', 'last_name', 'email', 'password', 'role_id')

    def test_stock(self, mysql_introspector):
        classification = mysql_introspector.classify('product_size_stock')

        assert classification.fillable == ('product_id', 'size_id', 'stock')
        assert classification.updatable == ('stock',)


class TestRepositoryOnMySQL:

    @pytest.fixture
    def seeded(self, mysql_connection, mysql_introspector):
        products = GenericRepository(mysql_connection, 'products', mysql_introspector)
        sizes = GenericRepository(mysql_connection, 'sizes', mysql_introspector)
        product_id = products.create({'title': 'Away Jersey', 'price': 45000, 'sku': 'AW-01'})
        size_id = sizes.create({'label': 'M'})
        return product_id, size_id

    def test_stock_entry_lifecycle(self, mysql_connection, mysql_introspector, seeded):
        product_id, size_id = seeded
        stock = GenericRepository(mysql_connection, 'product_size_stock', mysql_introspector)

        key = stock.create({'product_id': product_id, 'size_id': size_id, 'stock': 4})
        assert key == {'product_id': product_id, 'size_id': size_id}

        entry = stock.find((product_id, size_id))
        assert entry['stock'] == 4
        assert entry['products_label'] == 'Away Jersey'
        assert entry['sizes_label'] == 'M'

        assert stock.update(key, {'stock': 9}).success
        assert stock.find((product_id, size_id))['stock'] == 9

        assert stock.delete(key) is True
        assert stock.find((product_id, size_id)) is None

    def test_duplicate_entry_conflicts(self, mysql_connection, mysql_introspector, seeded):
        product_id, size_id = seeded
        stock = GenericRepository(mysql_connection, 'product_size_stock', mysql_introspector)
        stock.create({'product_id': product_id, 'size_id': size_id, 'stock': 1})

        with pytest.raises(ConflictError):
            stock.create({'product_id': product_id, 'size_id': size_id, 'stock': 2})

        assert stock.find((product_id, size_id))['stock'] == 1

    def test_missing_required_value_is_a_persistence_error(self, mysql_connection, mysql_introspector):
        sizes = GenericRepository(mysql_connection, 'sizes', mysql_introspector)

        with pytest.raises(PersistenceError):
            sizes.create({'label': None})

    def test_client_update_skips_identifier(self, mysql_connection, mysql_introspector):
        clients = GenericRepository(mysql_connection, 'clients', mysql_introspector)
        client_id = clients.create({
            'trade_name': 'Club Store', 'tax_id': '7654321-K', 'discount_percentage': 10,
        })

        result = clients.update(client_id, {'contact_name': 'Rosa', 'tax_id': '1-9'})

        assert result.not_updated == ('tax_id',)
        client = clients.find(client_id)
        assert client['tax_id'] == '7654321-K'
        assert client['category'] == 'Regular'
