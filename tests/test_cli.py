"""
Tests for the command line entry point.
"""

import pytest
from sqlalchemy import create_engine, inspect

from recy import cli


class TestCli:
    def test_init_db_creates_tables(self, tmp_path) -> None:
        database_url = f"sqlite:///{tmp_path / 'recy.db'}"

        cli.main(["init-db", "--database-url", database_url])

        engine = create_engine(database_url)
        try:
            tables = set(inspect(engine).get_table_names())
        finally:
            engine.dispose()
        assert {"recycling_reports", "audits"} <= tables

    def test_serve_defaults(self) -> None:
        args = cli.build_parser().parse_args(["serve"])
        assert args.func is cli.cmd_serve
        assert (args.host, args.port, args.reload) == ("0.0.0.0", 8000, False)

    def test_command_is_required(self) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])
