import json

from rive_codegen import cli


def test_generate_command(tmp_path, write_scene, main_scene, capsys):
    scene = write_scene(main_scene)
    output = tmp_path / "out.dart"
    assert cli.main(["generate", "-i", str(scene), "-o", str(output), "-e", "jinja"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["ok"] is True
    assert summary["files"] == ["main"]
    assert "idleU1" in output.read_text(encoding="utf-8")


def test_inspect_command_honours_ignore_private(write_scene, capsys):
    scene = write_scene({"artboards": [{"name": "Main"}, {"name": "_Draft"}]})
    assert cli.main(["inspect", "-i", str(scene), "--ignore-private"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [item["artboard_name"] for item in data["riv_files"][0]["artboards"]] == ["Main"]


def test_validate_reports_rejections(tmp_path, capsys):
    (tmp_path / "broken.scene.yaml").write_text("artboards: {", encoding="utf-8")
    assert cli.main(["validate", "-i", str(tmp_path)]) == 1
    summary = json.loads(capsys.readouterr().out)
    assert summary["rejected"][0]["reason"] == "decode_failure"


def test_errors_return_non_zero(tmp_path, capsys):
    assert cli.main(["validate", "-i", str(tmp_path)]) == 1
    assert cli.main(["generate", "-i", str(tmp_path), "-o", str(tmp_path / "x"), "-e", "handlebars"]) == 1


def test_config_file_with_overrides(tmp_path, write_scene, main_scene):
    write_scene(main_scene, directory=tmp_path / "assets")
    config_file = tmp_path / "codegen.yaml"
    config_file.write_text("input: assets\noutput: out.dart\n", encoding="utf-8")
    output = tmp_path / "other.dart"
    assert cli.main(["generate", "-c", str(config_file), "-o", str(output)]) == 0
    assert output.exists()
    assert not (tmp_path / "out.dart").exists()


def test_generate_succeeds_when_some_files_are_rejected(tmp_path, write_scene, main_scene, capsys):
    write_scene(main_scene, name="good", directory=tmp_path / "in")
    (tmp_path / "in" / "empty.scene.yaml").write_bytes(b"")
    output = tmp_path / "out.dart"
    assert cli.main(["generate", "-i", str(tmp_path / "in"), "-o", str(output)]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["ok"] is False
    assert summary["files"] == ["good"]
    assert output.exists()
