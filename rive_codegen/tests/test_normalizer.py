from pathlib import Path

from rive_codegen.enginelib.asset_graph import AssetType, PropertyType
from rive_codegen.enginelib.casing import ReservedWordRegistry
from rive_codegen.enginelib.errors import Rejection, RejectionReason
from rive_codegen.enginelib.model import SourceAsset
from rive_codegen.enginelib.normalizer import (
    MetadataNormalizer,
    Stage,
    find_candidate_files,
    process_batch,
    process_file,
    should_include,
)
from rive_codegen.enginelib.scene_document import SceneDocument, SceneDocumentDecoder

VIEW_MODEL_SCENE = {
    "artboards": [{"name": "Main", "view_model_id": 0}],
    "enums": [
        {"name": "Mood", "values": ["happy", "Very Sad"]},
        {"name": "Secret", "values": ["a", "b"]},
    ],
    "view_models": [
        {
            "name": "Settings",
            "properties": [
                {"name": "mood", "type": "enum", "enum": "Mood", "value": 1},
                {"name": "_hidden", "type": "enum", "enum": "Secret", "value": 0},
                {"name": "volume", "type": "number", "value": 0.5},
                {"name": "tint", "type": "color", "value": -1},
                {"name": "child", "type": "viewModel", "view_model": "Child"},
                {"name": "secretChild", "type": "viewModel", "view_model": "privateChild"},
                {"name": "lost", "type": "viewModel", "view_model": "Nowhere"},
                {"name": "tap", "type": "trigger"},
            ],
        },
        {"name": "Child", "properties": [{"name": "title", "type": "string", "value": "Hi"}]},
        {"name": "privateChild"},
        {"name": "internalState"},
    ],
}


def normalize(payload, ignore_private=False, file_name="main") -> SourceAsset:
    normalizer = MetadataNormalizer(ignore_private=ignore_private)
    asset = normalizer.normalize(SceneDocument(payload), file_name)
    assert normalizer.stage is Stage.DONE
    return asset


def test_inclusion_filter():
    assert should_include("_tmp", ignore_private=False)
    assert not should_include("_tmp", ignore_private=True)
    assert not should_include("InternalThing", ignore_private=True)
    assert not should_include("PRIVATE_x", ignore_private=True)
    assert should_include("publicInternal", ignore_private=True)
    assert should_include("", ignore_private=True)


def test_duplicate_animation_names_are_uniqued(main_scene):
    asset = normalize(main_scene)
    artboard = asset.artboards[0]
    assert artboard.names.camel == "main"
    assert [item.names.camel for item in artboard.animations] == ["idle", "idleU1"]
    assert [item.names.name for item in artboard.animations] == ["Idle", "Idle"]
    machine = artboard.state_machines[0]
    assert machine.names.camel == "controller"
    assert machine.inputs[0].default_value == "true"


def test_file_name_variants():
    asset = normalize({}, file_name="my-cool_file")
    assert asset.original_file_name == "my-cool_file"
    assert asset.names.pascal == "MyCoolFile"
    assert asset.names.snake == "my_cool_file"
    assert asset.artboards == ()
    assert not asset.defaults.present


def test_enums_filtered_by_live_references():
    asset = normalize(VIEW_MODEL_SCENE, ignore_private=True)
    assert [item.names.name for item in asset.enums] == ["Mood"]
    assert [item.names.name for item in asset.view_models] == ["Settings", "Child"]


def test_enums_kept_without_filter():
    asset = normalize(VIEW_MODEL_SCENE)
    assert [item.names.name for item in asset.enums] == ["Mood", "Secret"]
    assert len(asset.view_models) == 4


def test_enums_kept_when_no_view_model_survives():
    payload = {
        "enums": [{"name": "Mood", "values": ["a"]}],
        "view_models": [{"name": "_Hidden", "properties": []}],
    }
    asset = normalize(payload, ignore_private=True)
    assert asset.view_models == ()
    assert [item.names.name for item in asset.enums] == ["Mood"]


def test_enum_values_mark_explicit_keys():
    asset = normalize(VIEW_MODEL_SCENE)
    values = asset.enums[0].values
    assert [value.key for value in values] == ["happy", "Very Sad"]
    assert [value.needs_explicit_value for value in values] == [False, True]
    assert values[1].names.camel == "verySad"


def test_property_backing_names_and_defaults():
    asset = normalize(VIEW_MODEL_SCENE, ignore_private=True)
    props = {prop.names.name: prop for prop in asset.view_models[0].properties}
    assert set(props) == {"mood", "volume", "tint", "child", "lost", "tap"}

    mood = props["mood"]
    assert mood.property_type is PropertyType.ENUM
    assert mood.backing.name == "Mood"
    assert mood.default_value == "Very Sad"
    assert mood.default_camel == "verySad"

    assert props["volume"].default_value == "0.500000"
    assert props["tint"].default_value == "0xFFFFFFFF"
    assert props["tap"].default_value == ""

    child = props["child"]
    assert child.backing.pascal == "Child"
    assert child.default_value is None

    lost = props["lost"]
    assert lost.backing is None
    assert lost.default_value is None


def test_private_artboards_animations_and_state_machines_are_skipped():
    payload = {
        "artboards": [
            {"name": "_Scratch"},
            {
                "name": "Hero",
                "animations": ["run", "internalDebug", "jump"],
                "state_machines": [{"name": "privateSM"}, {"name": "Main SM"}],
            },
        ]
    }
    asset = normalize(payload, ignore_private=True)
    assert [artboard.names.name for artboard in asset.artboards] == ["Hero"]
    hero = asset.artboards[0]
    assert hero.index == 1
    assert not hero.is_default
    assert [item.names.name for item in hero.animations] == ["run", "jump"]
    assert [item.names.camel for item in hero.state_machines] == ["mainSm"]
    # the default artboard is still the file's first artboard
    assert asset.defaults.artboard_name == "_Scratch"


def test_artboard_identifiers_unique_per_file():
    payload = {"artboards": [{"name": "Main"}, {"name": "main"}, {"name": "MAIN"}]}
    asset = normalize(payload)
    assert [artboard.names.camel for artboard in asset.artboards] == ["main", "mainU1", "mainU2"]


def test_sibling_scopes_are_independent():
    payload = {
        "artboards": [
            {"name": "A", "animations": ["Idle"], "state_machines": [{"name": "Idle", "inputs": [{"name": "Idle", "type": "trigger"}]}]},
            {"name": "B", "animations": ["Idle"]},
        ]
    }
    asset = normalize(payload)
    assert asset.artboards[0].animations[0].names.camel == "idle"
    assert asset.artboards[0].state_machines[0].names.camel == "idle"
    assert asset.artboards[0].state_machines[0].inputs[0].names.camel == "idle"
    assert asset.artboards[1].animations[0].names.camel == "idle"


def test_artboard_view_model_and_default_state_machine():
    payload = {
        "artboards": [
            {"name": "A", "view_model_id": 1, "default_state_machine": "SM", "state_machines": [{"name": "SM"}]},
            {"name": "B", "view_model_id": 5},
            {"name": "C"},
        ],
        "view_models": [{"name": "First"}, {"name": "Second"}],
    }
    asset = normalize(payload)
    first, second, third = asset.artboards
    assert first.is_default
    assert first.view_model_name == "Second"
    assert first.default_state_machine_name == "SM"
    assert second.view_model_id == 5
    assert not second.has_view_model
    assert not third.has_view_model
    assert not third.has_default_state_machine
    assert asset.defaults.view_model_name == "Second"
    assert asset.defaults.state_machine_name == "SM"


def test_text_runs_are_escaped_and_unnamed_runs_skipped():
    payload = {
        "artboards": [
            {
                "name": "Card",
                "text_runs": [
                    {"name": "Title", "text": 'Say "hi"\nnow'},
                    {"name": "", "text": "anonymous"},
                    {"name": "Title", "text": "again"},
                ],
            }
        ]
    }
    runs = normalize(payload).artboards[0].text_runs
    assert [run.names.camel for run in runs] == ["title", "titleU1"]
    assert runs[0].default_value == 'Say "hi"\nnow'
    assert runs[0].escaped_value == 'Say \\"hi\\"\\nnow'


def test_nested_text_runs_follow_named_paths():
    payload = {
        "artboards": [
            {
                "name": "Screen",
                "text_runs": [{"name": "Heading", "text": "x"}],
                "nested_artboards": [{"name": "Btn", "artboard": "Button"}],
            },
            {
                "name": "Button",
                "text_runs": [{"name": "Label", "text": "OK"}],
                "nested_artboards": [{"name": "", "artboard": "Frame"}],
            },
            {
                "name": "Frame",
                "text_runs": [{"name": "Inner", "text": ""}],
                "nested_artboards": [{"name": "Icon", "artboard": "Glyph"}],
            },
            {"name": "Glyph", "text_runs": [{"name": "Symbol", "text": "*"}]},
        ]
    }
    screen = normalize(payload).artboards[0]
    assert [(run.name, run.path) for run in screen.nested_text_runs] == [
        ("Label", "Btn"),
        ("Inner", "Btn"),
        ("Symbol", "Btn/Icon"),
    ]


def test_nested_cycles_terminate():
    payload = {
        "artboards": [
            {"name": "A", "nested_artboards": [{"name": "toB", "artboard": "B"}, {"name": "self", "artboard": "A"}]},
            {"name": "B", "text_runs": [{"name": "T", "text": ""}], "nested_artboards": [{"name": "back", "artboard": "A"}]},
        ]
    }
    asset = normalize(payload)
    assert [(run.name, run.path) for run in asset.artboards[0].nested_text_runs] == [("T", "toB")]
    assert [(run.name, run.path) for run in asset.artboards[1].nested_text_runs] == []


def test_dangling_nested_artboard_is_ignored():
    payload = {"artboards": [{"name": "A", "nested_artboards": [{"name": "x", "artboard": "Missing"}]}]}
    assert normalize(payload).artboards[0].nested_text_runs == ()


def test_assets_unique_by_raw_name():
    payload = {
        "assets": [
            {"name": "logo", "type": "image", "extension": "png", "id": 3, "cdn_uuid": "u-1", "cdn_base_url": "https://cdn"},
            {"name": "logo", "type": "font", "extension": "ttf", "id": 4},
        ]
    }
    first, second = normalize(payload).assets
    assert first.names.name == "logo"
    assert second.names.name == "logoU1"
    assert second.names.camel == "logou1"

    case_only = normalize({"assets": [{"name": "Logo"}, {"name": "logo"}]}).assets
    assert [ref.names.name for ref in case_only] == ["Logo", "logoU1"]
    assert [ref.names.camel for ref in case_only] == ["logo", "logou1"]
    assert first.asset_type is AssetType.IMAGE
    assert first.asset_id == "3"
    assert first.cdn_uuid == "u-1"
    assert second.file_extension == "ttf"


def test_reserved_words_are_rewritten():
    caser = ReservedWordRegistry().caser("dart")
    payload = {"artboards": [{"name": "Main", "animations": ["class", "class"]}]}
    asset = MetadataNormalizer(caser=caser).normalize(SceneDocument(payload), "main")
    assert [item.names.camel for item in asset.artboards[0].animations] == ["classValue", "classValueU1"]


# ----------------------- files -----------------------
def test_process_file_strips_extension(write_scene, main_scene):
    path = write_scene(main_scene, name="hero_banner")
    asset = process_file(path, SceneDocumentDecoder())
    assert isinstance(asset, SourceAsset)
    assert asset.original_file_name == "hero_banner"
    assert asset.names.camel == "heroBanner"


def test_process_file_rejects_empty_and_broken_input(tmp_path):
    decoder = SceneDocumentDecoder()
    empty = tmp_path / "empty.scene.yaml"
    empty.write_bytes(b"")
    broken = tmp_path / "broken.scene.yaml"
    broken.write_text("artboards: [", encoding="utf-8")

    rejection = process_file(empty, decoder)
    assert isinstance(rejection, Rejection)
    assert rejection.reason is RejectionReason.EMPTY_INPUT
    assert process_file(broken, decoder).reason is RejectionReason.DECODE_FAILURE
    assert process_file(tmp_path / "missing.scene.yaml", decoder).reason is RejectionReason.DECODE_FAILURE


def test_batch_continues_after_rejections(tmp_path, write_scene, main_scene):
    good = write_scene(main_scene, name="good")
    bad = tmp_path / "bad.scene.yaml"
    bad.write_bytes(b"")
    result = process_batch([bad, good], SceneDocumentDecoder())
    assert not result.ok
    assert [asset.original_file_name for asset in result.assets] == ["good"]
    assert [rejection.path for rejection in result.rejections] == [bad]
    assert result.summary()["rejected"][0]["reason"] == "empty_input"


def test_find_candidate_files(tmp_path, write_scene, main_scene):
    write_scene(main_scene, name="b")
    write_scene(main_scene, name="a")
    write_scene(main_scene, name="deep", directory=tmp_path / "sub")
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")

    found = find_candidate_files(tmp_path, ".scene.yaml")
    assert [path.name for path in found] == ["a.scene.yaml", "b.scene.yaml"]
    assert find_candidate_files(found[0], ".scene.yaml") == [found[0]]
    assert find_candidate_files(tmp_path / "notes.txt", ".scene.yaml") == []
    assert find_candidate_files(Path(tmp_path / "empty"), ".scene.yaml") == []


def test_out_of_range_numbers_do_not_stop_the_batch(tmp_path, write_scene, main_scene):
    huge = 10**400
    bad = write_scene(
        {
            "artboards": [
                {
                    "name": "Main",
                    "state_machines": [{"name": "SM", "inputs": [{"name": "speed", "type": "number", "value": huge}]}],
                }
            ],
            "view_models": [{"name": "VM", "properties": [{"name": "size", "type": "number", "value": huge}]}],
        },
        name="bad",
    )
    good = write_scene(main_scene, name="good")

    result = process_batch([bad, good], SceneDocumentDecoder())
    assert result.ok
    assert [asset.original_file_name for asset in result.assets] == ["bad", "good"]
    bad_asset = result.assets[0]
    assert bad_asset.view_models[0].properties[0].default_value == ""
    assert bad_asset.artboards[0].state_machines[0].inputs[0].default_value == ""
