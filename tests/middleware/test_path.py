from attrition.middleware import Artifact


def test_artifact_creates_directory(tmp_path):
    artifact = Artifact(version="20240101120000", job_type="train/mlp_attrition", root_dir=tmp_path)

    assert artifact.key_prefix == "train/mlp_attrition/20240101120000"
    assert artifact.dir_path.is_dir()
    assert artifact.file_path("model.bin") == tmp_path / "train/mlp_attrition/20240101120000/model.bin"
