"""
Column Classifier Tests

Given catalog metadata for the catalog tables, verify the fillable, updatable,
mandatory and foreign-key subsets every repository relies on.
"""

from database.schema import classifier
from database.schema.metadata import ColumnMetadata, ForeignKeyRef, TableMetadata
from catalog_fixtures import catalog_row, table_metadata


class TestFillable:

    def test_simple_key_and_defaulted_columns_are_excluded(self):
        """Given users, id, active (default 1) and registered_at are left to the database."""
        assert classifier.fillable(table_metadata('users')) == (
            'first_name', 'last_name', 'email', 'password', 'role_id', 'client_id', 'birth_date',
        )

    def test_zero_default_stays_fillable(self):
        fillable = classifier.fillable(table_metadata('clients'))

        assert 'discount_percentage' in fillable
        assert 'category' not in fillable
        assert 'id' not in fillable

    def test_composite_key_parts_are_fillable(self):
        assert classifier.fillable(table_metadata('product_size_stock')) == (
            'product_id', 'size_id', 'stock',
        )


class TestUpdatable:

    def test_excludes_keys_timestamps_and_enums(self):
        updatable = classifier.updatable(table_metadata('users'))

        assert 'id' not in updatable
        assert 'registered_at' not in updatable
        assert 'email' in updatable
        assert 'active' in updatable

    def test_excludes_immutable_business_identifier(self):
        updatable = classifier.updatable(table_metadata('clients'), immutable=('tax_id',))

        assert 'tax_id' not in updatable
        assert 'category' not in updatable
        assert updatable == (
            'trade_name', 'address', 'contact_name', 'contact_email', 'discount_percentage',
        )

    def test_composite_key_parts_are_never_updatable(self):
        assert classifier.updatable(table_metadata('product_size_stock')) == ('stock',)

    def test_restricted_columns_are_withheld(self):
        updatable = classifier.updatable(
            table_metadata('users'), restricted=('email', 'role_id', 'active'),
        )

        assert 'email' not in updatable
        assert 'role_id' not in updatable
        assert 'first_name' in updatable

    def test_granted_overrides_restriction_and_enum_rule(self):
        """A granted column is writable even if it is an enum or also restricted."""
        updatable = classifier.updatable(
            table_metadata('clients'), granted=('category',), restricted=('category',),
        )

        assert 'category' in updatable

    def test_granted_never_reopens_primary_key(self):
        updatable = classifier.updatable(table_metadata('sizes'), granted=('id',))

        assert updatable == ('label',)


class TestMandatory:

    def test_users(self):
        assert classifier.mandatory(table_metadata('users')) == (
            'first_name', 'last_name', 'email', 'password', 'role_id',
        )

    def test_nullable_and_defaulted_columns_are_optional(self):
        mandatory = classifier.mandatory(table_metadata('products'))

        assert mandatory == ('title', 'price', 'sku')

    def test_composite_key_parts_are_not_mandatory(self):
        assert classifier.mandatory(table_metadata('product_size_stock')) == ('stock',)


class TestForeignKeys:

    def test_references_become_join_targets(self):
        assert classifier.foreign_keys(table_metadata('product_size_stock')) == {
            'product_id': ForeignKeyRef('products', 'id'),
            'size_id': ForeignKeyRef('sizes', 'id'),
        }

    def test_excluded_table_is_skipped(self):
        meta = TableMetadata('orders', (
            ColumnMetadata.from_row(catalog_row('orders', 'id', 1, 'int', key='PRI', pk_type='simple')),
            ColumnMetadata.from_row(catalog_row('orders', 'reservation_id', 2, 'int',
                                                ref_table='reservations', ref_column='id')),
            ColumnMetadata.from_row(catalog_row('orders', 'client_id', 3, 'int',
                                                ref_table='clients', ref_column='id')),
        ))

        assert classifier.foreign_keys(meta, excluded_tables=('reservations',)) == {
            'client_id': ForeignKeyRef('clients', 'id'),
        }


def test_classify_bundles_every_subset():
    classification = classifier.classify(table_metadata('clients'), immutable=('tax_id',))

    assert classification.fillable == classifier.fillable(table_metadata('clients'))
    assert 'tax_id' not in classification.updatable
    assert classification.mandatory == ('trade_name', 'tax_id', 'discount_percentage')
    assert dict(classification.foreign_keys) == {}
    assert classifier.enum_columns(table_metadata('clients')) == {
        'category': ('Regular', 'Preferred'),
    }
