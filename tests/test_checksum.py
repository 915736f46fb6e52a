import hashlib
from pathlib import Path

from xctasks.core.checksum import (
    compute_hash,
    files_byte_equal,
    manifest_matches_lock,
    read_recorded_hash,
)


def test_compute_hash_is_deterministic(tmp_path: Path) -> None:
    first = tmp_path / "a"
    second = tmp_path / "b"
    first.write_bytes(b"pod 'Alamofire'\n")
    second.write_bytes(b"pod 'Alamofire'\n")

    assert compute_hash(first) == compute_hash(first)
    assert compute_hash(first) == compute_hash(second)
    assert compute_hash(first) == hashlib.sha1(b"pod 'Alamofire'\n").hexdigest()


def test_compute_hash_changes_with_content(tmp_path: Path) -> None:
    podfile = tmp_path / "Podfile"
    podfile.write_bytes(b"pod 'A'\n")
    before = compute_hash(podfile)
    podfile.write_bytes(b"pod 'B'\n")

    assert compute_hash(podfile) != before


def test_read_recorded_hash_extracts_named_field(tmp_path: Path) -> None:
    lock = tmp_path / "Podfile.lock"
    lock.write_text("PODS:\n  - A (1.0)\n\nPODFILE CHECKSUM: abc123\n\nCOCOAPODS: 1.12.1\n")

    assert read_recorded_hash(lock) == "abc123"
    assert read_recorded_hash(lock, key="COCOAPODS") == "1.12.1"


def test_read_recorded_hash_missing_inputs_return_none(tmp_path: Path) -> None:
    assert read_recorded_hash(tmp_path / "missing.lock") is None

    no_key = tmp_path / "no_key.lock"
    no_key.write_text("PODS: []\n")
    assert read_recorded_hash(no_key) is None

    not_mapping = tmp_path / "list.lock"
    not_mapping.write_text("- a\n- b\n")
    assert read_recorded_hash(not_mapping) is None

    broken = tmp_path / "broken.lock"
    broken.write_text("PODS: [unclosed\n")
    assert read_recorded_hash(broken) is None


def test_files_byte_equal(tmp_path: Path) -> None:
    a = tmp_path / "a"
    b = tmp_path / "b"
    c = tmp_path / "c"
    a.write_bytes(b"same")
    b.write_bytes(b"same")
    c.write_bytes(b"other")

    assert files_byte_equal(a, b)
    assert not files_byte_equal(a, c)
    assert not files_byte_equal(a, tmp_path / "missing")
    assert not files_byte_equal(tmp_path / "missing", a)


def test_manifest_matches_lock(tmp_path: Path) -> None:
    podfile = tmp_path / "Podfile"
    podfile.write_bytes(b"pod 'A'\n")
    lock = tmp_path / "Podfile.lock"
    lock.write_text(f"PODFILE CHECKSUM: {compute_hash(podfile)}\n")

    assert manifest_matches_lock(podfile, lock)

    podfile.write_bytes(b"pod 'B'\n")
    assert not manifest_matches_lock(podfile, lock)
    assert not manifest_matches_lock(tmp_path / "missing", lock)
