import json

from urltabs.domain.models import Block
from urltabs.editor.blocks import (
    EditorData,
    block_type_variations,
    register_block_attributes,
)
from urltabs.editor.tabs import collect_tabs, visibility_indicator_class, visibility_panel
from urltabs.endpoints.registry import EndpointRegistry


def link(client_id, kind, url="", endpoint="tab", label=""):
    return Block(
        blockName="core/navigation-link",
        clientId=client_id,
        attrs={"kind": kind, "url": url, "tabEndpoint": endpoint, "label": label},
    )


def page(*extra):
    nav = Block(
        blockName="core/navigation",
        clientId="nav",
        innerBlocks=[
            link("l1", "tab-home", endpoint=""),
            link("l2", "tab-base"),
            link("l3", "tab", url="general", label="General"),
            link("l4", "tab", url="specs"),
            link("l5", "tab", url="general", label="General (again)"),
            link("l6", "tab", url="x", endpoint="overview", label="X"),
            Block(blockName="core/navigation-link", clientId="l7", attrs={"url": "/about/"}),
        ],
    )
    return [nav, *extra]


def test_collect_tabs_walks_tree_and_dedupes():
    tabs = collect_tabs(page())

    assert [(t.endpoint, t.url, t.kind) for t in tabs] == [
        ("tab", "", "tab-home"),
        ("tab", "", "tab-base"),
        ("tab", "general", "tab"),
        ("tab", "specs", "tab"),
        ("overview", "x", "tab"),
    ]
    # first occurrence wins on duplicates
    assert tabs[2].label == "General"


def test_collect_tabs_is_recomputed_from_current_state():
    assert collect_tabs([]) == ()
    blocks = page()
    assert collect_tabs(blocks) == collect_tabs(page())

    blocks[0].inner_blocks.append(link("l8", "tab", url="new"))
    assert ("tab", "new", "tab") in {(t.endpoint, t.url, t.kind) for t in collect_tabs(blocks)}


def test_visibility_panel_for_plain_block():
    para = Block(
        blockName="core/paragraph",
        clientId="p1",
        attrs={"hmUrlTabVisibility": {"condition": "specific-tab", "endpoint": "tab", "tabUrl": "general"}},
    )
    panel = visibility_panel("p1", page(para))

    assert panel.show_controls is True
    assert panel.rule.condition == "specific-tab"
    assert panel.endpoints == ("tab", "overview")
    assert panel.show_endpoint_selector is True
    # home/base tabs are not selectable
    assert panel.tab_options == (("General", "general"), ("specs", "specs"))
    assert [value for value, _ in panel.condition_options] == [
        "always",
        "no-endpoint",
        "endpoint-empty",
        "specific-tab",
    ]


def test_visibility_panel_hidden_without_tabs_or_under_ruled_parent():
    para = Block(blockName="core/paragraph", clientId="p1")
    assert visibility_panel("p1", [para]).show_controls is False

    group = Block(
        blockName="core/group",
        clientId="g1",
        attrs={"hmUrlTabVisibility": {"condition": "no-endpoint"}},
        innerBlocks=[Block(blockName="core/paragraph", clientId="p2")],
    )
    assert visibility_panel("p2", page(group)).show_controls is False
    assert visibility_panel("g1", page(group)).show_controls is True
    assert visibility_panel("l3", page()).show_controls is False
    assert visibility_panel("missing", page()).show_controls is False


def test_single_endpoint_hides_selector():
    blocks = [link("a", "tab", url="one"), Block(blockName="core/paragraph", clientId="p")]
    panel = visibility_panel("p", blocks)
    assert panel.show_endpoint_selector is False
    assert panel.rule.condition == "always"


def test_visibility_indicator_class():
    ruled = Block(blockName="core/paragraph", clientId="p", attrs={"hmUrlTabVisibility": {"condition": "no-endpoint"}})
    plain = Block(blockName="core/paragraph", clientId="q")

    assert visibility_indicator_class(ruled, page(ruled)) == "wp-block-has-hm-tab-visibility"
    assert visibility_indicator_class(plain, page(plain)) is None
    assert visibility_indicator_class(ruled, [ruled]) is None


def test_register_block_attributes():
    nav = register_block_attributes({"attributes": {"label": {"type": "string"}}}, "core/navigation-link")
    assert nav["attributes"]["tabEndpoint"] == {"type": "string", "default": "tab"}
    assert "hmUrlTabVisibility" not in nav["attributes"]

    original = {"name": "core/paragraph", "attributes": {}}
    para = register_block_attributes(original)
    assert para["attributes"]["hmUrlTabVisibility"]["default"] == {
        "condition": "always",
        "endpoint": "tab",
        "tabUrl": "",
    }
    assert original["attributes"] == {}


def test_block_type_variations():
    assert block_type_variations([], "core/paragraph") == []
    names = [v["name"] for v in block_type_variations([{"name": "existing"}], "core/navigation-link")]
    assert names == ["existing", "tab-home", "tab-base", "tab"]


def test_editor_data_snapshot_json():
    registry = EndpointRegistry([{"name": "tab"}, {"name": "overview", "mask": "CATEGORIES"}])
    data = EditorData.from_registry(registry, "https://example.org/page/")

    payload = json.loads(data.to_json())
    assert payload == {
        "endpoints": [{"name": "tab", "mask": 8191}, {"name": "overview", "mask": 512}],
        "currentUrl": "https://example.org/page/",
    }
