from annotate_canvas.utils import read_json, write_json


class TestJsonHelpers:
    def test_write_creates_parent_folders(self, tmp_path):
        path = tmp_path / "a" / "b" / "data.json"
        write_json(str(path), {"token": "tok"})
        assert read_json(str(path)) == {"token": "tok"}
