import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from api_collection.cli import main
from api_collection.collection.models import SCHEMA_V2_1_0

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliBuild:
    def test_build_from_descriptor_file(self, tmp_path):
        output = tmp_path / "out" / "users.postman.json"
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(FIXTURES / "users.yaml"), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "Found 3 endpoints." in result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["info"]["name"] == "Users API"
        assert data["info"]["schema"] == SCHEMA_V2_1_0
        assert [i["name"] for i in data["item"]] == ["/v1/users/", "/v1/users/{id}", "/v1/users/{id}"]
        assert [q["key"] for q in data["item"][1]["request"]["url"]["query"]] == ["verbose"]

    def test_build_from_openapi(self, tmp_path):
        output = tmp_path / "pets.json"
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(FIXTURES / "petstore.yaml"), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "format: auto" in result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["info"]["name"] == "Swagger Petstore"
        assert len(data["item"]) == 3

    def test_name_and_base_url_options(self, tmp_path):
        output = tmp_path / "c.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "build", str(FIXTURES / "users.yaml"),
            "-o", str(output),
            "--name", "Renamed",
            "--base-url", "{{baseUrl}}",
        ])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["info"]["name"] == "Renamed"
        assert {i["request"]["url"]["host"][0] for i in data["item"]} == {"{{baseUrl}}"}

    def test_compact_indent(self, tmp_path):
        output = tmp_path / "c.json"
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(FIXTURES / "users.yaml"), "-o", str(output), "--indent", "0"])

        assert result.exit_code == 0, result.output
        assert output.read_text(encoding="utf-8").count("\n") == 1

    def test_rebuild_from_collection(self, tmp_path):
        first = tmp_path / "first.json"
        second = tmp_path / "second.json"
        runner = CliRunner()
        runner.invoke(main, ["build", str(FIXTURES / "users.yaml"), "-o", str(first)])
        result = runner.invoke(main, ["build", str(first), "-o", str(second)])

        assert result.exit_code == 0, result.output
        assert json.loads(first.read_text()) == json.loads(second.read_text())

    def test_bad_descriptor_file(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("name: no apis\n")
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(bad), "-o", str(tmp_path / "c.json")])

        assert result.exit_code == 1
        assert "missing 'apis' list" in result.output
        assert not (tmp_path / "c.json").exists()

    @patch("api_collection.cli.configure_logging")
    def test_verbose_sets_debug(self, mock_configure, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["-v", "build", str(FIXTURES / "users.yaml"), "-o", str(tmp_path / "c.json")])

        assert result.exit_code == 0, result.output
        mock_configure.assert_called_once_with("DEBUG")


class TestCliValidate:
    def test_valid(self, tmp_path):
        output = tmp_path / "c.json"
        runner = CliRunner()
        runner.invoke(main, ["build", str(FIXTURES / "users.yaml"), "-o", str(output)])
        result = runner.invoke(main, ["validate", str(output)])

        assert result.exit_code == 0
        assert "OK" in result.output

    def test_invalid(self, tmp_path):
        f = tmp_path / "c.json"
        f.write_text(json.dumps({"info": {"name": "x"}, "item": [{"name": "/x"}]}))
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(f)])

        assert result.exit_code == 1
        assert "item.0.request" in result.output


class TestCliShow:
    def test_lists_endpoints(self):
        runner = CliRunner()
        result = runner.invoke(main, ["show", str(FIXTURES / "petstore.yaml")])

        assert result.exit_code == 0
        assert result.output.splitlines() == ["GET /pets", "POST /pets", "GET /pets/{petId}"]

    def test_collection_with_string_request(self, tmp_path):
        f = tmp_path / "c.postman.json"
        f.write_text(
            json.dumps({"info": {"name": "S", "schema": SCHEMA_V2_1_0}, "item": [{"name": "x", "request": "https://h/x"}]}),
            encoding="utf-8",
        )
        runner = CliRunner()
        result = runner.invoke(main, ["show", str(f)])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["GET /x"]

    def test_numeric_name(self, tmp_path):
        f = tmp_path / "apis.yaml"
        f.write_text("name: 2024\napis:\n  - {path: /x}\n")
        runner = CliRunner()
        result = runner.invoke(main, ["show", str(f)])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["GET /x"]

    def test_invalid_utf8(self, tmp_path):
        f = tmp_path / "apis.yaml"
        f.write_bytes(b"apis:\n  - {path: /\xff}\n")
        runner = CliRunner()
        result = runner.invoke(main, ["show", str(f)])

        assert result.exit_code == 1
        assert "not UTF-8" in result.output
