"""Tests for batch loaders and the owner directory."""
import json

import pytest

from embedscape.loaders import (
    PointsFileLoader,
    TextsCsvLoader,
    get_loader,
    list_loaders,
    load_owner_directory,
)


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestPointsFileLoader:

    def test_loads_points_with_owner_aliases(self, tmp_path):
        path = write_json(tmp_path / "out.json", [
            {"ownerId": "user1", "text": "hello", "embedding": [0.1, 0.2, 0.3]},
            {"creatorId": 181694388, "text": "world", "embedding": [1, 2, 3]},
        ])

        df = PointsFileLoader(path).load()

        assert df["text"].tolist() == ["hello", "world"]
        assert df["owner_id"].tolist() == ["user1", "181694388"]
        assert df["embedding"].tolist() == [[0.1, 0.2, 0.3], [1.0, 2.0, 3.0]]

    def test_points_without_owner(self, tmp_path):
        path = write_json(tmp_path / "out.json", [
            {"text": "a", "embedding": [0, 1]},
            {"text": "b", "embedding": [1, 0]},
        ])

        df = PointsFileLoader(path).load()

        assert df["owner_id"].tolist() == [None, None]

    def test_mixed_lengths_raise(self, tmp_path):
        path = write_json(tmp_path / "out.json", [
            {"text": "a", "embedding": [0, 1]},
            {"text": "b", "embedding": [1, 0, 2]},
        ])
        with pytest.raises(ValueError, match="mixed lengths"):
            PointsFileLoader(path).load()

    def test_unsupported_length_raises(self, tmp_path):
        path = write_json(tmp_path / "out.json", [{"text": "a", "embedding": [0, 1, 2, 3]}])
        with pytest.raises(ValueError):
            PointsFileLoader(path).load()

    def test_missing_embedding_raises(self, tmp_path):
        path = write_json(tmp_path / "out.json", [{"text": "a"}])
        with pytest.raises(ValueError, match="embedding"):
            PointsFileLoader(path).load()

    def test_non_array_raises(self, tmp_path):
        path = write_json(tmp_path / "out.json", {"text": "a"})
        with pytest.raises(ValueError):
            PointsFileLoader(path).load()

    def test_missing_file(self, tmp_path):
        loader = PointsFileLoader(tmp_path / "nope.json")
        assert not loader.exists()
        with pytest.raises(FileNotFoundError):
            loader.load()


class TestTextsCsvLoader:

    def test_detects_columns(self, tmp_path):
        path = tmp_path / "texts.csv"
        path.write_text("Content,author\nfirst,ann\n,bob\nthird,\n", encoding="utf-8")

        df = TextsCsvLoader(path).load()

        assert df["text"].tolist() == ["first", "third"]
        assert df["owner_id"].tolist() == ["ann", None]

    def test_default_owner_fills_gaps(self, tmp_path):
        path = tmp_path / "texts.csv"
        path.write_text("text,owner\na,x\nb,\n", encoding="utf-8")

        df = TextsCsvLoader(path, default_owner="me").load()

        assert df["owner_id"].tolist() == ["x", "me"]

    def test_missing_text_column_raises(self, tmp_path):
        path = tmp_path / "texts.csv"
        path.write_text("title,owner\na,x\n", encoding="utf-8")
        with pytest.raises(ValueError, match="text"):
            TextsCsvLoader(path).load()

    def test_missing_file_is_empty(self, tmp_path):
        df = TextsCsvLoader(tmp_path / "nope.csv").load()
        assert df.empty
        assert list(df.columns) == ["text", "owner_id"]


def test_registry():
    assert {"points_file", "texts_csv"} <= set(list_loaders())
    assert isinstance(get_loader("texts_csv"), TextsCsvLoader)
    with pytest.raises(ValueError):
        get_loader("tweets")


class TestOwnerDirectory:

    def test_names_and_colors(self, tmp_path):
        path = write_json(tmp_path / "owners.json", {
            "user1": {"name": "Amir", "color": "#8884d8"},
            "user2": "Bea",
            "user3": {"color": "#82ca9d"},
        })

        owners = load_owner_directory(path)

        assert owners.names == {"user1": "Amir", "user2": "Bea"}
        assert owners.colors == {"user1": "#8884d8", "user3": "#82ca9d"}
        assert owners.name_for("user1") == "Amir"
        assert owners.name_for("user3") == "user3"
        assert owners.name_for(None) == "Unknown"

    def test_missing_file_is_empty(self, tmp_path):
        owners = load_owner_directory(tmp_path / "nope.json")
        assert owners.names == {} and owners.colors == {}

    def test_bad_entry_raises(self, tmp_path):
        path = write_json(tmp_path / "owners.json", {"user1": 5})
        with pytest.raises(ValueError):
            load_owner_directory(path)
