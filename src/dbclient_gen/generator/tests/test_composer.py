from __future__ import annotations

import ast
import datetime
import importlib.util
import shutil
import sys
from pathlib import Path

import pytest

from dbclient_gen.config import Configuration, add_defaults, parse_config_mapping
from dbclient_gen.generator import CLIENT_PLAN, TemplateComposer, compose, stage_marker, write_client
from dbclient_gen.engines import embed
from dbclient_gen.generator.rendering import (
    TEMPLATES_ROOT,
    dataclass_default,
    identifier,
    make_environment,
    python_type,
    snake_case,
)
from dbclient_gen.platforms import map_binary_target
from dbclient_gen.config.models import FieldSpec
from dbclient_gen.utils.errors import ConfigurationError, TemplateError


def _minimal(tmp_path: Path) -> Configuration:
    return add_defaults(Configuration(output=str(tmp_path / "out")), environ={})


def _load(path: Path, monkeypatch):
    name = f"generated_{path.parent.name}"
    spec = importlib.util.spec_from_file_location(name, path)
    module = importlib.util.module_from_spec(spec)
    monkeypatch.setitem(sys.modules, name, module)
    spec.loader.exec_module(module)
    return module


def test_minimal_config_composes_markers_in_order(tmp_path: Path) -> None:
    source = compose(_minimal(tmp_path))

    ast.parse(source)
    positions = [source.index(stage_marker(name)) for name in CLIENT_PLAN.names]
    assert positions == sorted(positions)
    assert source.startswith(stage_marker("_header"))
    assert "PACKAGE = 'db'" in source


def test_compose_is_deterministic(tmp_path: Path, sample_request) -> None:
    config = add_defaults(parse_config_mapping(sample_request), environ={})
    assert compose(config) == compose(config)


def test_compose_renders_datamodel(tmp_path: Path, sample_request) -> None:
    source = compose(add_defaults(parse_config_mapping(sample_request), environ={}))

    assert "class Role(str, enum.Enum):" in source
    assert "class User:" in source
    assert "class PostFields:" in source
    assert "def user(self)" in source
    assert "    name: Optional[str] = None" in source


def test_template_error_names_offending_template(tmp_path: Path) -> None:
    templates = tmp_path / "templates"
    shutil.copytree(TEMPLATES_ROOT, templates)
    (templates / "models.py.jinja").write_text("def broken(:\n    pass\n", encoding="utf-8")
    composer = TemplateComposer(env=make_environment(templates))

    with pytest.raises(TemplateError) as exc:
        composer.compose(_minimal(tmp_path))

    assert exc.value.ctx["template"] == "models"
    assert exc.value.ctx["template_line"] == 1


def test_undefined_template_variable_is_template_error(tmp_path: Path) -> None:
    templates = tmp_path / "templates"
    shutil.copytree(TEMPLATES_ROOT, templates)
    (templates / "enums.py.jinja").write_text("X = {{ not_in_context }}\n", encoding="utf-8")
    composer = TemplateComposer(env=make_environment(templates))

    with pytest.raises(TemplateError) as exc:
        composer.compose(_minimal(tmp_path))

    assert exc.value.ctx["template"] == "enums"


def test_write_client_rejects_file_output(tmp_path: Path) -> None:
    config = Configuration(output=str(tmp_path / "db.py"), package="db")
    with pytest.raises(ConfigurationError):
        write_client(config, "x = 1\n")
    assert not (tmp_path / "db.py").exists()


def test_write_client_creates_directory(tmp_path: Path) -> None:
    config = _minimal(tmp_path)
    target = write_client(config, compose(config))
    assert target == tmp_path / "out" / "db_gen.py"


def test_generated_client_runs_against_mock_engine(tmp_path: Path, sample_request, monkeypatch) -> None:
    config = add_defaults(parse_config_mapping(sample_request), environ={})
    module = _load(write_client(config, compose(config)), monkeypatch)

    client, engine = module.mock_client()
    query = client.user.find_unique(module.UserFields.email.equals("a@example.com"))
    engine.expect(query, {"id": "u1", "email": "a@example.com", "role": "ADMIN", "extra": 1})

    user = query.exec()

    assert isinstance(user, module.User)
    assert (user.id, user.email, user.name) == ("u1", "a@example.com", None)
    engine.ensure_expectations_met()


def test_generated_client_batches_and_maps_errors(tmp_path: Path, sample_request, monkeypatch) -> None:
    config = add_defaults(parse_config_mapping(sample_request), environ={})
    module = _load(write_client(config, compose(config)), monkeypatch)
    client, engine = module.mock_client()

    created = client.post.create(
        {"id": "p1", "title": "hello", "published": False, "createdAt": datetime.datetime(2024, 1, 2)}
    )
    counted = client.post.count(module.PostFields.published.equals(True))
    transaction = client.transaction(created, counted)
    engine.expect(transaction, {"data": [{"id": "p1", "title": "hello", "published": False, "createdAt": "x"}, 3]})

    post, count = transaction.exec()
    assert post.title == "hello"
    assert count == 3
    assert created.build()["args"]["data"]["createdAt"] == "2024-01-02T00:00:00"

    missing = client.user.find_unique_or_raise(module.UserFields.id.equals("nope"))
    engine.expect(missing, None)
    with pytest.raises(module.NotFoundError):
        missing.exec()

    duplicate = client.user.create({"id": "u1", "email": "a@example.com", "role": module.Role.USER})
    engine.expect(duplicate, {"errors": [{"user_facing_error": {"error_code": "P2002", "message": "dup"}}]})
    with pytest.raises(module.UniqueViolationError):
        duplicate.exec()
    assert duplicate.build()["args"]["data"]["role"] == "USER"


def test_rendering_helpers() -> None:
    assert snake_case("UserProfile") == "user_profile"
    assert snake_case("HTTPLog") == "http_log"
    assert python_type(FieldSpec(name="tags", type="String", is_list=True)) == "List[str]"
    assert python_type(FieldSpec(name="bio", type="String", is_required=False)) == "Optional[str]"
    assert python_type(FieldSpec(name="author", type="User", kind="object")) == "'User'"
    assert python_type(FieldSpec(name="kind", type="class", kind="enum")) == "class_"


def test_keyword_names_become_safe_identifiers() -> None:
    assert identifier("from") == "from_"
    assert identifier("None") == "None_"
    assert identifier("title") == "title"
    assert dataclass_default(FieldSpec(name="title", type="String")) == ""
    assert dataclass_default(FieldSpec(name="from", type="String")) == (
        " = dataclasses.field(metadata={'wire': 'from'})"
    )
    assert dataclass_default(FieldSpec(name="class", type="String", is_required=False)) == (
        " = dataclasses.field(default=None, metadata={'wire': 'class'})"
    )


def test_generated_client_handles_keyword_schema_names(tmp_path: Path, sample_request, monkeypatch) -> None:
    datamodel = sample_request["datamodel"]
    datamodel["enums"][0]["values"].append({"name": "None"})
    post = datamodel["models"][1]
    post["fields"].append({"name": "from", "type": "String"})
    post["fields"].append({"name": "class", "type": "String", "isRequired": False})
    datamodel["models"].append({"name": "Class", "fields": [{"name": "id", "type": "String", "isId": True}]})
    config = add_defaults(parse_config_mapping(sample_request), environ={})

    module = _load(write_client(config, compose(config)), monkeypatch)

    assert module.Role.None_.value == "None"
    client, engine = module.mock_client()
    assert client.class_.model == "Class"
    query = client.post.find_first(module.PostFields.from_.equals("home"))
    engine.expect(
        query,
        {"id": "p1", "title": "t", "published": True, "createdAt": "x", "from": "home", "class": "a"},
    )

    found = query.exec()

    assert (found.from_, found.class_) == ("home", "a")
    assert query.build()["args"]["where"] == {"from": {"equals": "home"}}


def test_generated_client_prefers_host_libc_then_static_engine(
    tmp_path: Path, sample_request, monkeypatch
) -> None:
    config = add_defaults(parse_config_mapping(sample_request), environ={})
    module = _load(write_client(config, compose(config)), monkeypatch)
    out = Path(config.output)
    binary = tmp_path / "engine.bin"
    binary.write_bytes(b"\x7fELF" * 16)
    for target in ("debian-openssl-3.0.x", "linux-static-x64", "linux-musl-openssl-3.0.x"):
        embed(map_binary_target(target), binary, config.package, out)

    assert module.find_engine_module(out, host=("linux", "x64", "glibc")).PLATFORM == "debian-openssl-3.0.x"
    assert module.find_engine_module(out, host=("linux", "x64", "musl")).PLATFORM == "linux-musl-openssl-3.0.x"

    (out / "query-engine-linux-musl-openssl-3.0.x_gen.py").unlink()
    assert module.find_engine_module(out, host=("linux", "x64", "musl")).PLATFORM == "linux-static-x64"
    assert module.find_engine_module(out, host=("linux", "arm64", "glibc")) is None
    assert module.find_engine_module(out, host=("darwin", "x64", None)) is None
