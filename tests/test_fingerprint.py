import hashlib
import os

import pytest

from appevents.services.session_logger import fingerprint
from appevents.services.session_logger.fingerprint import (
    PackageFingerprintCache,
    cache_key,
    compute_checksum,
)
from appevents.services.session_logger.kv_store import KeyValueStore
from appevents.services.session_logger.package_info import (
    ConfiguredPackageInspector,
    PackageInfo,
)

PACKAGE_NAME = "com.example.host"


class BrokenStore(KeyValueStore):
    def get(self, key):
        raise RuntimeError("storage unavailable")

    def put(self, key, value):
        raise RuntimeError("storage unavailable")


@pytest.fixture
def checksum_calls(monkeypatch):
    """Records every path the cache hashes"""
    calls = []

    def counting_checksum(path):
        calls.append(path)
        return compute_checksum(path)

    monkeypatch.setattr(fingerprint, "compute_checksum", counting_checksum)
    return calls


def _make_non_utf8_bundle(root):
    root.mkdir()
    (root / "ok.bin").write_bytes(b"payload")
    try:
        with open(os.path.join(os.fsencode(root), b"bad\xff.bin"), "wb") as f:
            f.write(b"more payload")
    except OSError:
        pytest.skip("filesystem rejects non-UTF-8 file names")
    return root


def _single_package_cache(store, source_path, version="1.0.0"):
    inspector = ConfiguredPackageInspector({
        PACKAGE_NAME: PackageInfo(PACKAGE_NAME, version, source_path),
    })
    return PackageFingerprintCache(store, inspector)


# --- compute_checksum ---

def test_file_checksum_is_md5_hex(package_file):
    expected = hashlib.md5(package_file.read_bytes()).hexdigest()
    assert compute_checksum(str(package_file)) == expected
    assert len(expected) == 32


def test_missing_path_returns_none(tmp_path):
    assert compute_checksum(str(tmp_path / "missing.apk")) is None


def test_path_with_null_byte_returns_none(tmp_path):
    assert compute_checksum(str(tmp_path) + "/host\x00.apk") is None


def test_directory_checksum_deterministic_and_content_sensitive(tmp_path):
    root = tmp_path / "bundle"
    (root / "lib").mkdir(parents=True)
    (root / "main.py").write_text("print('hi')")
    (root / "lib" / "util.py").write_text("X = 1")

    first = compute_checksum(str(root))
    assert first == compute_checksum(str(root))
    assert len(first) == 32

    (root / "lib" / "util.py").write_text("X = 2")
    assert compute_checksum(str(root)) != first


def test_directory_with_non_utf8_file_name_is_hashed(tmp_path):
    plain = tmp_path / "plain"
    plain.mkdir()
    (plain / "ok.bin").write_bytes(b"payload")
    bundle = _make_non_utf8_bundle(tmp_path / "bundle")

    checksum = compute_checksum(str(bundle))

    assert checksum is not None
    assert len(checksum) == 32
    assert checksum != compute_checksum(str(plain))


# --- cache ---

def test_second_resolve_is_cache_hit(fingerprint_cache, store, checksum_calls):
    first = fingerprint_cache.resolve(PACKAGE_NAME)
    second = fingerprint_cache.resolve(PACKAGE_NAME)

    assert first is not None
    assert first == second
    assert len(checksum_calls) == 1
    assert store.get(cache_key("1.0.0")) == first


def test_version_change_forces_recomputation(store, package_file, checksum_calls):
    inspector = ConfiguredPackageInspector({
        PACKAGE_NAME: PackageInfo(PACKAGE_NAME, "1.0.0", str(package_file)),
    })
    cache = PackageFingerprintCache(store, inspector)
    old = cache.resolve(PACKAGE_NAME)

    inspector.register(PackageInfo(PACKAGE_NAME, "1.0.1", str(package_file)))
    new = cache.resolve(PACKAGE_NAME)

    assert len(checksum_calls) == 2
    assert new == old
    assert store.get(cache_key("1.0.0")) == old
    assert store.get(cache_key("1.0.1")) == new


def test_lookup_ignores_malformed_entry(fingerprint_cache, store, checksum_calls):
    store.put(cache_key("1.0.0"), "not-a-digest")
    assert fingerprint_cache.lookup("1.0.0") is None

    resolved = fingerprint_cache.resolve(PACKAGE_NAME)
    assert len(resolved) == 32
    assert len(checksum_calls) == 1


def test_store_if_absent_keeps_existing_value(fingerprint_cache, store):
    fingerprint_cache.store_if_absent("2.0", "a" * 32)
    fingerprint_cache.store_if_absent("2.0", "b" * 32)
    assert store.get(cache_key("2.0")) == "a" * 32


def test_unreadable_package_returns_none(store, tmp_path):
    cache = _single_package_cache(store, str(tmp_path / "gone.apk"))

    assert cache.resolve(PACKAGE_NAME) is None
    assert store.get(cache_key("1.0.0")) is None


def test_path_rejected_by_os_returns_none(store, tmp_path):
    cache = _single_package_cache(store, str(tmp_path) + "/a\x00b")

    assert cache.resolve(PACKAGE_NAME) is None
    assert store.get(cache_key("1.0.0")) is None


def test_non_utf8_bundle_resolves_and_caches(store, tmp_path):
    bundle = _make_non_utf8_bundle(tmp_path / "bundle")
    cache = _single_package_cache(store, str(bundle))

    checksum = cache.resolve(PACKAGE_NAME)

    assert checksum is not None
    assert store.get(cache_key("1.0.0")) == checksum


def test_unexpected_hashing_error_returns_none(store, package_file, monkeypatch):
    def exploding_checksum(path):
        raise RuntimeError("hash backend unavailable")

    monkeypatch.setattr(fingerprint, "compute_checksum", exploding_checksum)
    cache = _single_package_cache(store, str(package_file))

    assert cache.resolve(PACKAGE_NAME) is None
    assert store.get(cache_key("1.0.0")) is None


def test_unknown_package_returns_none(fingerprint_cache):
    assert fingerprint_cache.resolve("com.example.unknown") is None


def test_broken_store_still_computes(inspector, package_file):
    cache = PackageFingerprintCache(BrokenStore(), inspector)
    assert cache.resolve(PACKAGE_NAME) == hashlib.md5(package_file.read_bytes()).hexdigest()


def test_incomplete_store_cannot_be_instantiated():
    class ReadOnlyStore(KeyValueStore):
        def get(self, key):
            return None

    with pytest.raises(TypeError):
        ReadOnlyStore()
