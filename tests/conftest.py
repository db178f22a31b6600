import pytest

from appevents.services.session_logger import (
    AppEventQueue,
    ConfiguredPackageInspector,
    FlushBehavior,
    MemoryKeyValueStore,
    PackageFingerprintCache,
    PackageInfo,
    SessionLogger,
)

PACKAGE_NAME = "com.example.host"


@pytest.fixture
def package_file(tmp_path):
    path = tmp_path / "host-release.apk"
    path.write_bytes(b"PK\x03\x04 host application payload" * 64)
    return path


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def inspector(package_file):
    return ConfiguredPackageInspector({
        PACKAGE_NAME: PackageInfo(PACKAGE_NAME, "1.0.0", str(package_file)),
    })


@pytest.fixture
def fingerprint_cache(store, inspector):
    return PackageFingerprintCache(store, inspector)


@pytest.fixture
def queue():
    return AppEventQueue()


@pytest.fixture
def session_logger(fingerprint_cache, queue):
    return SessionLogger(
        fingerprint_cache=fingerprint_cache,
        queue=queue,
        flush_behavior=lambda: FlushBehavior.AUTO,
    )
