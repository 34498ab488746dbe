# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from sqlalchemy import text


def test_database_schema_applied(fxt_session):
    """Test that database tables have been created successfully."""
    result = fxt_session.execute(text("SELECT name FROM sqlite_master WHERE type='table'"))
    tables = {row[0] for row in result.fetchall()}

    assert tables == {"alembic_version", "subject", "data_processor", "processor_parameter", "output_file"}

    (result,) = fxt_session.execute(text("SELECT version_num FROM alembic_version")).fetchone()
    assert result == "3f6c1a9d2b7e"


def test_data_processor_columns(fxt_session):
    """Test that the processor table stores the metric schema inline next to the discriminator."""
    columns = {row[1] for row in fxt_session.execute(text("PRAGMA table_info('data_processor')")).fetchall()}

    assert columns == {
        "id",
        "version",
        "created_at",
        "updated_at",
        "slug",
        "name",
        "command",
        "input_data_type",
        "output_data_type",
        "processor_type",
        "visibility_scope",
        "description",
        "code_project_id",
        "author_id",
        "metric_schema_type",
        "metric_schema_ground_truth",
        "metric_schema_prediction",
        "metric_schema_json_blob",
    }


def test_child_tables_cascade_on_processor_delete(fxt_session):
    for table in ("processor_parameter", "output_file"):
        foreign_keys = fxt_session.execute(text(f"PRAGMA foreign_key_list('{table}')")).fetchall()
        assert len(foreign_keys) == 1
        # (id, seq, table, from, to, on_update, on_delete, match)
        assert foreign_keys[0][2] == "data_processor"
        assert foreign_keys[0][3] == "data_processor_id"
        assert foreign_keys[0][6] == "CASCADE"
