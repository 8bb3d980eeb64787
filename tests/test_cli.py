"""End-to-end tests of the command dispatcher with an offline query client."""

import io
from unittest.mock import patch

import pytest

from amoid import cli
from amoid.formatter import bold
from amoid.models import QueryResult

from .conftest import StubClient


class TtyInput(io.StringIO):
    """stdin attached to an interactive terminal."""

    def isatty(self):
        return True


class TestParseArgs:
    def test_convert_is_default(self):
        args = cli.parse_args(["a@b", "c@d"])
        assert args.command == "convert"
        assert args.identifier == ["a@b", "c@d"]
        assert args.input == "auto"
        assert args.output is None
        assert not args.user and not args.wx and not args.debug

    def test_convert_flags(self):
        args = cli.parse_args(["-i", "slug", "-o", "id", "-o", "user_id", "-U", "-w", "-d", "my-addon"])
        assert args.input == "slug"
        assert args.output == ["id", "user_id"]
        assert args.user and args.wx and args.debug
        assert args.identifier == ["my-addon"]

    def test_long_flags(self):
        args = cli.parse_args(["convert", "--input", "id", "--output", "guid", "--user", "--wx", "--debug", "1"])
        assert (args.input, args.output, args.user, args.wx, args.debug) == ("id", ["guid"], True, True, True)

    def test_partition(self):
        args = cli.parse_args(["partition", "1", "a@b", "-o", "guid", "-o", "id"])
        assert args.command == "partition"
        assert args.output == ["guid", "id"]

    def test_input_only_once(self):
        with pytest.raises(cli.InvalidArgument, match="may only be specified once"):
            cli.parse_args(["-i", "id", "-i", "guid", "1"])

    def test_invalid_choice(self):
        with pytest.raises(cli.InvalidArgument) as exc_info:
            cli.parse_args(["-o", "name", "1"])
        assert "invalid choice" in str(exc_info.value)
        assert exc_info.value.usage.startswith("usage:")

    def test_partition_rejects_user_id_section(self):
        with pytest.raises(cli.InvalidArgument):
            cli.parse_args(["partition", "-o", "user_id"])

    def test_debug_before_command(self):
        args = cli.parse_args(["-d", "partition", "1", "a@b"])
        assert args.command == "partition"
        assert args.debug
        assert args.identifier == ["1", "a@b"]

    def test_long_debug_before_default_command(self):
        args = cli.parse_args(["--debug", "a@b"])
        assert args.command == "convert"
        assert args.debug
        assert args.identifier == ["a@b"]

    def test_identifiers_mixed_with_options(self):
        args = cli.parse_args(["a@b", "-o", "id", "c@d", "-U", "e@f"])
        assert args.identifier == ["a@b", "c@d", "e@f"]
        assert args.output == ["id"]
        assert args.user

    def test_partition_identifiers_mixed_with_options(self):
        args = cli.parse_args(["partition", "1", "-o", "guid", "a@b"])
        assert args.identifier == ["1", "a@b"]
        assert args.output == ["guid"]


class TestConvert:
    def test_single_column(self, capsys):
        client = StubClient(rows=[{"id": 1}, {"id": 2}])
        assert cli.main(["-o", "id", "a@b", "c@d"], client=client) == 0

        out, err = capsys.readouterr()
        assert out == "1\n2\n"
        assert "Converting guids to ids" in err
        assert "not found" not in err
        assert "a.guid IN ('a@b','c@d')" in client.queries[0]

    def test_default_columns_print_csv(self, capsys):
        client = StubClient(rows=[{"id": 1, "guid": "a@b", "slug": "x,y"}])
        assert cli.main(["1", "2"], client=client) == 0

        out, err = capsys.readouterr()
        assert out == "id,guid,slug\n1,a@b,x\\,y\n"
        assert "Converting ids to ids,guids,slugs" in err
        assert "Warning: 1 entries were not found" in err
        assert client.queries[0].startswith("SELECT a.id,MIN(a.guid) AS guid,MIN(a.slug) AS slug\n")

    def test_nothing_found(self, capsys):
        client = StubClient(rows=[])
        assert cli.main(["a", "b", "c"], client=client) == 0

        out, err = capsys.readouterr()
        assert out == ""
        assert "Warning: 3 entries were not found" in err

    def test_user_expansion_adds_user_id_column(self, capsys):
        client = StubClient(rows=[{"id": 1, "guid": "a@b", "user_id": 7}])
        assert cli.main(["-U", "-o", "id", "-o", "guid", "a@b"], client=client) == 0

        out, _ = capsys.readouterr()
        assert out == "id,guid,user_id\n1,a@b,7\n"
        assert client.queries[0].startswith("SELECT a.id,MIN(a.guid) AS guid,MIN(au.user_id) AS user_id\n")

    def test_explicit_input_type(self, capsys):
        client = StubClient(rows=[{"guid": "a@b"}])
        assert cli.main(["-i", "slug", "-o", "guid", "12345"], client=client) == 0
        assert "a.slug IN ('12345')" in client.queries[0]

    def test_user_id_only(self, capsys):
        client = StubClient(rows=[{"user_id": 7}])
        assert cli.main(["-o", "user_id", "a@b"], client=client) == 0

        out, _ = capsys.readouterr()
        assert out == "7\n"
        assert client.queries[0].startswith("SELECT au.user_id\n")

    def test_wx_with_user_id_only_is_rejected(self, capsys):
        client = StubClient()
        assert cli.main(["-w", "-o", "user_id", "a@b"], client=client) == 1
        assert "--wx cannot be combined" in capsys.readouterr().err
        assert client.queries == []

    def test_debug_prints_query(self, capsys):
        client = StubClient(rows=[{"id": 1}])
        client.debug = True
        assert cli.main(["-d", "-o", "id", "a@b"], client=client) == 0
        assert "NOT LIKE 'guid-reused-by-pk-%'" in capsys.readouterr().err

    def test_reads_stdin(self, capsys):
        client = StubClient(rows=[{"guid": "a@b"}])
        with patch.object(cli.sys, "stdin", io.StringIO("1\n\n2\n")):
            assert cli.main(["-o", "guid"], client=client) == 0

        out, err = capsys.readouterr()
        assert out == "a@b\n"
        assert "Waiting for" not in err
        assert "a.id IN ('1','2')" in client.queries[0]
        assert "Warning: 1 entries were not found" in err

    def test_identifiers_after_options_are_kept(self, capsys):
        client = StubClient(rows=[{"id": 1}, {"id": 2}])
        assert cli.main(["a@b", "-o", "id", "c@d"], client=client) == 0
        assert capsys.readouterr().out == "1\n2\n"
        assert "a.guid IN ('a@b','c@d')" in client.queries[0]

    def test_prompts_on_interactive_stdin(self, capsys):
        client = StubClient(rows=[{"id": 1}])
        with patch.object(cli.sys, "stdin", TtyInput("a@b\n")):
            assert cli.main(["-i", "guid", "-o", "id"], client=client) == 0

        out, err = capsys.readouterr()
        assert "Waiting for guids... (one per line, Ctrl+D to finish)" in err
        assert "Waiting for" not in out
        assert out == "1\n"

    def test_no_identifiers(self, capsys):
        with patch.object(cli.sys, "stdin", io.StringIO("\n\n")):
            assert cli.main([], client=StubClient()) == 1
        assert "No identifiers given" in capsys.readouterr().err


class TestErrors:
    def test_bad_flag_exits_with_usage(self, capsys):
        assert cli.main(["--nope", "1"], client=StubClient()) == 1
        err = capsys.readouterr().err
        assert err.startswith("usage:")
        assert "Error:" in err

    def test_missing_config(self, capsys, tmp_path, monkeypatch):
        monkeypatch.setenv("AMORC", str(tmp_path / "missing"))
        assert cli.main(["1"]) == 1
        assert "Error: Could not read config file" in capsys.readouterr().err

    def test_missing_credential(self, capsys, amorc):
        amorc("[auth]\n")
        assert cli.main(["1"]) == 1
        assert "Error: Missing redash API key" in capsys.readouterr().err

    def test_remote_failure(self, capsys):
        client = StubClient()
        with patch.object(client, "run_query", side_effect=cli.AmoidError("job failed")):
            assert cli.main(["1"], client=client) == 1
        out, err = capsys.readouterr()
        assert out == ""
        assert "Error: job failed" in err

    def test_uses_configured_redash_client(self, capsys, amorc):
        amorc("[auth]\nredash_key = k\n")
        with patch("amoid.db.redash_client.RedashClient.run_query") as run_query:
            run_query.return_value = QueryResult(columns=["id"], rows=[{"id": 3}])
            assert cli.main(["-o", "id", "a@b"]) == 0
        assert capsys.readouterr().out == "3\n"


class TestPartition:
    def test_debug_before_command_runs_partition(self, capsys):
        client = StubClient()
        assert cli.main(["-d", "partition", "1", "a@b"], client=client) == 0

        out, err = capsys.readouterr()
        assert out == bold("IDs:") + "\n1\n\n" + bold("GUIDs:") + "\na@b\n"
        assert "Found 1 ids, 1 guids, and 0 potential slugs" in err
        assert client.queries == []

    def test_sections_with_headers(self, capsys):
        assert cli.main(["partition", "1", "a@b", "slug", "2"]) == 0
        out = capsys.readouterr().out
        assert out == bold("IDs:") + "\n1\n2\n\n" + bold("GUIDs:") + "\na@b\n\n" + bold("Slugs:") + "\nslug\n"

    def test_flat_list(self, capsys):
        assert cli.main(["partition", "1", "a@b", "slug", "-o", "slug", "-o", "id"]) == 0
        assert capsys.readouterr().out == "1\nslug\n"

    def test_debug_counts(self, capsys):
        assert cli.main(["partition", "-d", "1", "a@b", "x", "y"]) == 0
        assert "Found 1 ids, 1 guids, and 2 potential slugs" in capsys.readouterr().err

    def test_never_loads_config(self, capsys, tmp_path, monkeypatch):
        monkeypatch.setenv("AMORC", str(tmp_path / "missing"))
        with patch.object(cli.sys, "stdin", io.StringIO("{aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee}\n")):
            assert cli.main(["partition", "-o", "guid"]) == 0
        assert capsys.readouterr().out == "{aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee}\n"
