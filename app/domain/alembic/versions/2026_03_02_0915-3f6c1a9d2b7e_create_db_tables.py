# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""Create DB tables

Revision ID: 3f6c1a9d2b7e
Revises:
Create Date: 2026-03-02 09:15:41.208133+00:00

"""

# DO NOT EDIT MANUALLY EXISTING MIGRATIONS.

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

from domain.db.constraints import CheckConstraintName, ForeignKeyName, UniqueConstraintName

# revision identifiers, used by Alembic.
revision: str = '3f6c1a9d2b7e'
down_revision: str | None = None
branch_labels: str | (Sequence[str] | None) = None
depends_on: str | (Sequence[str] | None) = None

DATA_TYPES = ('ANY', 'NONE', 'HIERARCHICAL', 'IMAGE', 'TABULAR', 'TIME_SERIES', 'VIDEO', 'VOICE', 'MODEL')


def upgrade() -> None:
    op.create_table('subject',
    sa.Column('slug', sa.String(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('slug', name=UniqueConstraintName.SUBJECT_SLUG)
    )

    op.create_table('data_processor',
    sa.Column('version', sa.Integer(), nullable=False),
    sa.Column('slug', sa.String(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('command', sa.String(), nullable=False),
    sa.Column('input_data_type', sa.Enum(*DATA_TYPES, name='datatype'), nullable=False),
    sa.Column('output_data_type', sa.Enum(*DATA_TYPES, name='datatype'), nullable=False),
    sa.Column(
        'processor_type',
        sa.Enum('ALGORITHM', 'OPERATION', 'VISUALISATION', name='dataprocessortype'),
        nullable=False,
    ),
    sa.Column(
        'visibility_scope',
        sa.Enum('PRIVATE', 'INTERNAL', 'PUBLIC', name='visibilityscope'),
        nullable=False,
    ),
    sa.Column('description', sa.String(length=1024), nullable=False),
    sa.Column('code_project_id', sa.Uuid(), nullable=True),
    sa.Column('author_id', sa.Uuid(), nullable=True),
    sa.Column(
        'metric_schema_type',
        sa.Enum('RECALL', 'PRECISION', 'F1_SCORE', 'UNDEFINED', name='metrictype'),
        nullable=False,
    ),
    sa.Column('metric_schema_ground_truth', sa.Text(), nullable=False),
    sa.Column('metric_schema_prediction', sa.Text(), nullable=False),
    sa.Column('metric_schema_json_blob', sa.Text(), nullable=False),
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    sa.ForeignKeyConstraint(
        ['author_id'], ['subject.id'], name=ForeignKeyName.DATA_PROCESSOR_AUTHOR, ondelete='SET NULL'
    ),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('slug', name=UniqueConstraintName.DATA_PROCESSOR_SLUG),
    sa.CheckConstraint(
        'length(description) <= 1024', name=CheckConstraintName.DATA_PROCESSOR_DESCRIPTION_LENGTH
    )
    )
    op.create_index('ix_data_processor_processor_type', 'data_processor', ['processor_type'])

    op.create_table('processor_parameter',
    sa.Column('data_processor_id', sa.Uuid(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column(
        'type',
        sa.Enum(
            'BOOLEAN', 'STRING', 'INTEGER', 'FLOAT', 'COMPLEX', 'DICTIONARY', 'LIST', 'TUPLE', 'UNDEFINED',
            name='parametertype',
        ),
        nullable=False,
    ),
    sa.Column('order', sa.Integer(), nullable=False),
    sa.Column('default_value', sa.Text(), nullable=False),
    sa.Column('required', sa.Boolean(), nullable=False),
    sa.Column('group', sa.String(), nullable=False),
    sa.Column('description', sa.String(length=1024), nullable=True),
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    sa.ForeignKeyConstraint(
        ['data_processor_id'], ['data_processor.id'],
        name=ForeignKeyName.PARAMETER_DATA_PROCESSOR, ondelete='CASCADE'
    ),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('data_processor_id', 'name', name=UniqueConstraintName.PARAMETER_NAME_PER_PROCESSOR)
    )

    op.create_table('output_file',
    sa.Column('data_processor_id', sa.Uuid(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('path', sa.Text(), nullable=False),
    sa.Column('order', sa.Integer(), nullable=False),
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    sa.ForeignKeyConstraint(
        ['data_processor_id'], ['data_processor.id'],
        name=ForeignKeyName.OUTPUT_FILE_DATA_PROCESSOR, ondelete='CASCADE'
    ),
    sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    op.drop_table('output_file')
    op.drop_table('processor_parameter')
    op.drop_index('ix_data_processor_processor_type', table_name='data_processor')
    op.drop_table('data_processor')
    op.drop_table('subject')
