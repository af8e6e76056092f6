"""Initial marketplace personalization schema.

Revision ID: 001
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum types are created once up front and shared between tables.
coordinate_type = postgresql.ENUM('PERCENTAGE', 'ABSOLUTE', name='coordinatetype', create_type=False)
product_status = postgresql.ENUM(
    'DRAFT', 'PENDING', 'PUBLISHED', 'REJECTED', name='productstatus', create_type=False
)
post_validation_action = postgresql.ENUM(
    'AUTO_PUBLISH', 'TO_DRAFT', name='postvalidationaction', create_type=False
)


def upgrade() -> None:
    """Create catalog, placement and publication tables."""

    bind = op.get_bind()
    coordinate_type.create(bind, checkfirst=True)
    product_status.create(bind, checkfirst=True)
    post_validation_action.create(bind, checkfirst=True)

    # Base products and their views
    op.create_table(
        'base_products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'product_images',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('view', sa.String(length=50), nullable=True),
        sa.Column('url', sa.String(length=1024), nullable=True),
        sa.Column('natural_width', sa.Integer(), nullable=True),
        sa.Column('natural_height', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['product_id'], ['base_products.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )

    # Printable zones
    op.create_table(
        'delimitations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_image_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=True),
        sa.Column('x', sa.Float(), nullable=False),
        sa.Column('y', sa.Float(), nullable=False),
        sa.Column('width', sa.Float(), nullable=False),
        sa.Column('height', sa.Float(), nullable=False),
        sa.Column('rotation', sa.Float(), nullable=True),
        sa.Column('coordinate_type', coordinate_type, nullable=True),
        sa.Column('original_x', sa.Float(), nullable=True),
        sa.Column('original_y', sa.Float(), nullable=True),
        sa.Column('original_width', sa.Float(), nullable=True),
        sa.Column('original_height', sa.Float(), nullable=True),
        sa.Column('reference_width', sa.Integer(), nullable=True),
        sa.Column('reference_height', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['product_image_id'], ['product_images.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )

    # Designs
    op.create_table(
        'designs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vendor_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('image_url', sa.String(length=1024), nullable=True),
        sa.Column('storage_public_id', sa.String(length=255), nullable=True),
        sa.Column('is_published', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_designs_vendor_id', 'designs', ['vendor_id'])
    op.create_index('ix_designs_image_url', 'designs', ['image_url'])
    op.create_index('ix_designs_storage_public_id', 'designs', ['storage_public_id'])

    # Vendor products
    op.create_table(
        'vendor_products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vendor_id', sa.Integer(), nullable=False),
        sa.Column('base_product_id', sa.Integer(), nullable=True),
        sa.Column('design_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('status', product_status, nullable=False),
        sa.Column('is_validated', sa.Boolean(), nullable=True),
        sa.Column('validated_at', sa.DateTime(), nullable=True),
        sa.Column('validated_by', sa.Integer(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('post_validation_action', post_validation_action, nullable=False),
        sa.Column('validation_bypassed', sa.Boolean(), nullable=True),
        sa.Column('bypassed_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['base_product_id'], ['base_products.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['design_id'], ['designs.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_vendor_products_vendor_id', 'vendor_products', ['vendor_id'])

    # Design placements, one per (product, design)
    op.create_table(
        'product_design_positions',
        sa.Column('vendor_product_id', sa.Integer(), nullable=False),
        sa.Column('design_id', sa.Integer(), nullable=False),
        sa.Column('position', postgresql.JSONB(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['vendor_product_id'], ['vendor_products.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['design_id'], ['designs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('vendor_product_id', 'design_id')
    )

    # Publication audit trail
    op.create_table(
        'publication_events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('event_type', sa.String(length=64), nullable=False),
        sa.Column('old_status', product_status, nullable=False),
        sa.Column('new_status', product_status, nullable=False),
        sa.Column('actor_id', sa.Integer(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('bypass', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['product_id'], ['vendor_products.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_publication_events_product_id', 'publication_events', ['product_id'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('ix_publication_events_product_id', table_name='publication_events')
    op.drop_table('publication_events')
    op.drop_table('product_design_positions')
    op.drop_index('ix_vendor_products_vendor_id', table_name='vendor_products')
    op.drop_table('vendor_products')
    op.drop_index('ix_designs_storage_public_id', table_name='designs')
    op.drop_index('ix_designs_image_url', table_name='designs')
    op.drop_index('ix_designs_vendor_id', table_name='designs')
    op.drop_table('designs')
    op.drop_table('delimitations')
    op.drop_table('product_images')
    op.drop_table('base_products')

    bind = op.get_bind()
    post_validation_action.drop(bind, checkfirst=True)
    product_status.drop(bind, checkfirst=True)
    coordinate_type.drop(bind, checkfirst=True)
