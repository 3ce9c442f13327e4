from __future__ import annotations

from ctxroots.locator import ContextLocator


def test_locates_nested_roots_on_disk(workspace) -> None:
    workspace.file("app/.packages")
    workspace.file("app/lib/main.dart")
    workspace.file("app/example/analysis_options.yaml")
    workspace.file("app/example/main.dart")
    workspace.file("app/.git/HEAD")
    workspace.file("app/packages/dep/.packages")

    roots = ContextLocator().locate_roots([workspace.path("app")])

    assert [root.root.path for root in roots] == [
        workspace.path("app"),
        workspace.path("app/example"),
    ]
    app_root, example = roots
    assert app_root.manifest_path == workspace.path("app/.packages")
    assert app_root.excluded_paths == [
        workspace.path("app/.git"),
        workspace.path("app/example"),
        workspace.path("app/packages"),
    ]
    assert example.manifest_path == workspace.path("app/.packages")
    assert example.options_path == workspace.path("app/example/analysis_options.yaml")
    assert example.is_analyzed(workspace.path("app/example/main.dart"))
    assert not app_root.is_analyzed(workspace.path("app/example/main.dart"))


def test_relative_and_duplicate_inputs_collapse(workspace, monkeypatch) -> None:
    workspace.file("app/lib/main.dart")
    monkeypatch.chdir(workspace.root)

    roots = ContextLocator().locate_roots(["app", "./app", workspace.path("app"), "app/lib"])

    assert [root.root.path for root in roots] == [workspace.path("app")]


def test_missing_paths_on_disk_are_ignored(workspace) -> None:
    workspace.file("app/lib/main.dart")

    roots = ContextLocator().locate_roots(
        [workspace.path("nope"), workspace.path("app")],
        excluded_paths=[workspace.path("also-missing")],
    )

    assert [root.root.path for root in roots] == [workspace.path("app")]
    assert roots[0].excluded_paths == []
