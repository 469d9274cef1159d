from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from typing import Any

from actions.context import ActionContributor, DispatchContext
from actions.handlers import HandlerRegistry
from actions.schemas import ActionSchema, HandlerRef
from actions.store import SchemaStore
from console.prompt_engine import render_prompt
from protocol.errors import CyclicSchemaReference, InvalidConfig, InvalidHandler, SchemaNotFound


def write_schema(root: Path, rel_path: str, payload: Any) -> Path:
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix == ".json":
        path.write_text(json.dumps(payload), encoding="utf-8")
    else:
        path.write_text(payload, encoding="utf-8")
    return path


class SchemaStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        base = Path(self._tmp.name)
        self.child = base / "child"
        self.parent = base / "parent"
        self.cwd = base / "work"
        self.registry = HandlerRegistry()
        self.context = DispatchContext.from_contributors(
            [ActionContributor("child", self.child), ActionContributor("parent", self.parent)],
            cwd=self.cwd,
        )
        self.store = SchemaStore(self.context, self.registry)

    def test_namespaced_action_resolves_nested_path(self) -> None:
        write_schema(self.child, "app/update.json", {"handler": {"method": "update"}})

        schema = self.store.resolve("app:update")

        self.assertIsNotNone(schema)
        assert schema is not None
        self.assertEqual(schema.source, "app/update")
        self.assertEqual(schema.handler, HandlerRef(method="update"))

    def test_child_root_wins_over_parent_root(self) -> None:
        write_schema(self.child, "build.json", {"arguments": {"a": {"prompt": "child"}}})
        write_schema(self.parent, "build.json", {"arguments": {"a": {"prompt": "parent"}}})

        schema = self.store.resolve("build")

        assert schema is not None
        self.assertEqual(schema.arguments["a"].prompt, "child")

    def test_parent_root_and_cwd_fallback_are_searched(self) -> None:
        write_schema(self.parent, "inherited.json", {"arguments": {}})
        write_schema(self.cwd, "settings/cli/local.json", {"arguments": {}})

        self.assertIsNotNone(self.store.resolve("inherited"))
        self.assertIsNotNone(self.store.resolve("local"))
        self.assertEqual(self.context.roots[-1], self.cwd / "settings/cli")

    def test_yaml_schema_is_supported(self) -> None:
        write_schema(
            self.child,
            "release.yaml",
            "handler:\n  method: release\narguments:\n  version:\n    prompt: Version?\n    index: 0\n",
        )

        schema = self.store.resolve("release")

        assert schema is not None
        self.assertEqual(schema.arguments["version"].index, 0)
        self.assertEqual(schema.arguments["version"].prompt, "Version?")

    def test_top_level_miss_returns_none(self) -> None:
        self.assertIsNone(self.store.resolve("missing"))

    def test_referenced_miss_is_fatal(self) -> None:
        write_schema(self.child, "deploy.json", {"arguments": {"target": {"options": {"web": "nowhere/web"}}}})

        with self.assertRaises(SchemaNotFound) as ctx:
            self.store.resolve("deploy")
        self.assertEqual(ctx.exception.name, "nowhere/web")

    def test_true_placeholder_loads_conventional_path(self) -> None:
        write_schema(self.child, "deploy.json", {"arguments": {"target": {"options": {"web": True}}}})
        write_schema(self.parent, "deploy/web.json", {"handler": {"method": "deployWeb"}, "arguments": {"port": {"defaultValue": 80}}})

        schema = self.store.resolve("deploy")

        assert schema is not None
        nested = schema.arguments["target"].options["web"]
        self.assertIsInstance(nested, ActionSchema)
        self.assertEqual(nested.handler, HandlerRef(method="deployWeb"))
        self.assertEqual(nested.arguments["port"].default, 80)

    def test_false_placeholder_removes_option(self) -> None:
        write_schema(self.child, "deploy.json", {"arguments": {"target": {"options": {"web": {}, "legacy": False}}}})

        schema = self.store.resolve("deploy")

        assert schema is not None
        self.assertEqual(schema.arguments["target"].accepted_values(), ["web"])

    def test_string_reference_loads_explicit_path(self) -> None:
        write_schema(self.child, "deploy.json", {"arguments": {"target": {"options": {"db": "shared:database"}}}})
        write_schema(self.child, "shared/database.json", {"label": "Database", "arguments": {"engine": {"options": ["pg"]}}})

        schema = self.store.resolve("deploy")

        assert schema is not None
        nested = schema.arguments["target"].options["db"]
        self.assertEqual(nested.label, "Database")
        self.assertEqual(schema.arguments["target"].labels(), ["Database"])

    def test_inline_options_are_expanded_recursively(self) -> None:
        write_schema(
            self.child,
            "deploy.json",
            {"arguments": {"target": {"options": {"web": {"arguments": {"tier": {"options": {"gold": True}}}}}}}},
        )
        write_schema(self.child, "deploy/web/gold.json", {"handler": {"method": "gold"}})

        schema = self.store.resolve("deploy")

        assert schema is not None
        web = schema.arguments["target"].options["web"]
        gold = web.arguments["tier"].options["gold"]
        self.assertEqual(gold.handler, HandlerRef(method="gold"))

    def test_legacy_flat_schema_form(self) -> None:
        write_schema(self.child, "flat.json", {"name": {"prompt": "N?"}, "commandKey": None, "note": "ignored"})

        schema = self.store.resolve("flat")

        assert schema is not None
        self.assertEqual(list(schema.arguments), ["name"])

    def test_argument_provider_supplies_options_once(self) -> None:
        calls: list[dict[str, Any]] = []

        def regions(params: dict[str, Any]) -> list[str]:
            calls.append(params)
            return ["eu", "us"]

        self.registry.register("child", "regions", regions)
        write_schema(
            self.child,
            "deploy.json",
            {"arguments": {"region": {"provider": {"method": "regions", "params": {"cloud": "x"}}}}},
        )

        first = self.store.resolve("deploy")
        second = self.store.resolve("deploy")

        assert first is not None
        self.assertIs(first, second)
        self.assertEqual(first.arguments["region"].options, ("eu", "us"))
        self.assertEqual(len(calls), 1)
        self.assertEqual(calls[0]["cloud"], "x")
        self.assertEqual(calls[0]["folder"], str(Path(__file__).resolve().parent))

    def test_option_provider_descriptor_becomes_nested_schema(self) -> None:
        class Plans:
            def build(self, params: dict[str, Any]) -> dict[str, Any]:
                return {"handler": {"method": "subscribe"}, "arguments": {"seats": {"defaultValue": params["seats"]}}}

        self.registry.register_instance("parent", Plans, "build", folder=self.parent)
        write_schema(
            self.child,
            "billing.json",
            {
                "arguments": {
                    "plan": {
                        "options": {"team": {"provider": {"namespace": "parent", "method": "build", "params": {"seats": 5}}}}
                    }
                }
            },
        )

        schema = self.store.resolve("billing")

        assert schema is not None
        team = schema.arguments["plan"].options["team"]
        self.assertEqual(team.handler, HandlerRef(method="subscribe"))
        self.assertEqual(team.arguments["seats"].default, 5)

    def test_option_provider_descriptor_keeps_its_label(self) -> None:
        self.registry.register("child", "widget", lambda params: {"handler": {"method": "createWidget"}})
        write_schema(
            self.child,
            "make.json",
            {
                "arguments": {
                    "type": {
                        "prompt": "Type?",
                        "displayType": "list",
                        "options": {"w": {"provider": {"method": "widget"}, "label": "Widget"}, "p": None},
                    }
                }
            },
        )

        schema = self.store.resolve("make")

        assert schema is not None
        info = schema.arguments["type"]
        self.assertEqual(info.options["w"].label, "Widget")
        self.assertEqual(info.options["w"].handler, HandlerRef(method="createWidget"))
        self.assertEqual(render_prompt(info), ("Type?\nWidget\np", ["w", "p"]))

    def test_unknown_provider_is_fatal(self) -> None:
        write_schema(self.child, "deploy.json", {"arguments": {"region": {"provider": {"method": "nope"}}}})

        with self.assertRaises(InvalidHandler):
            self.store.resolve("deploy")

    def test_cyclic_reference_is_rejected(self) -> None:
        write_schema(self.child, "a.json", {"arguments": {"next": {"options": {"go": "b"}}}})
        write_schema(self.child, "b.json", {"arguments": {"back": {"options": {"loop": "a"}}}})

        with self.assertRaises(CyclicSchemaReference) as ctx:
            self.store.resolve("a")
        self.assertEqual(ctx.exception.chain, ["a", "b", "a"])

    def test_malformed_file_reports_path(self) -> None:
        path = self.child / "broken.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("{not json", encoding="utf-8")

        with self.assertRaises(InvalidConfig) as ctx:
            self.store.resolve("broken")
        self.assertEqual(ctx.exception.path, path.resolve())
        self.assertIn(str(path.resolve()), str(ctx.exception))

    def test_non_object_root_is_invalid(self) -> None:
        write_schema(self.child, "list.json", ["a", "b"])

        with self.assertRaises(InvalidConfig):
            self.store.resolve("list")

    def test_command_key_must_name_an_argument(self) -> None:
        write_schema(self.child, "bad.json", {"commandKey": "type", "arguments": {"name": {}}})

        with self.assertRaises(InvalidConfig):
            self.store.resolve("bad")

    def test_invalid_display_type_is_rejected(self) -> None:
        write_schema(self.child, "bad.json", {"arguments": {"name": {"displayType": "grid"}}})

        with self.assertRaises(InvalidConfig):
            self.store.resolve("bad")

    def test_list_actions_merges_roots(self) -> None:
        write_schema(self.child, "build.json", {})
        write_schema(self.parent, "build.json", {})
        write_schema(self.parent, "app/update.yml", "arguments: {}\n")

        self.assertEqual(self.store.list_actions(), ["app:update", "build"])


if __name__ == "__main__":
    unittest.main()
