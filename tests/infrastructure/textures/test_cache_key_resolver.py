import os

from texture_loader.infrastructure.textures.cache_key_resolver import (
    CACHE_FOLDER_NAME,
    CacheKeyResolver,
    declared_type_for,
    extension_from_url,
    file_name_from_url,
    resolve,
)


def test_resolve_joins_last_segment_with_platform_separator():
    assert resolve("/cache", "https://x.test/img.png") == os.path.join("/cache", "img.png")


def test_resolve_is_deterministic_and_keeps_query_verbatim():
    url = "https://cdn.test/a/b/tex.png?v=2"
    assert resolve("/c", url) == resolve("/c", url)
    assert file_name_from_url(url) == "tex.png?v=2"


def test_same_file_name_on_different_hosts_collides():
    assert resolve("/c", "https://a.test/x/logo.png") == resolve("/c", "https://b.test/y/logo.png")


def test_url_ending_with_slash_resolves_to_root():
    assert resolve("/cache", "https://x.test/dir/") == "/cache"


def test_backslash_paths_use_last_segment():
    assert file_name_from_url(r"C:\assets\brick.jpg") == "brick.jpg"


def test_declared_type_uses_extension_verbatim():
    assert declared_type_for("https://x.test/img.PNG") == "image/PNG"
    assert declared_type_for("https://x.test/t.ktx2") == "image/ktx2"
    assert declared_type_for("https://x.test/noext") == "image/"
    assert extension_from_url("https://x.test/archive.tar.gz") == ".gz"
    assert extension_from_url("https://x.test/trailing.") == ""


def test_for_storage_root_and_ensure_root_is_idempotent(tmp_path):
    resolver = CacheKeyResolver.for_storage_root(tmp_path)
    assert resolver.cache_root == os.path.join(str(tmp_path), CACHE_FOLDER_NAME)

    first = resolver.ensure_root()
    second = resolver.ensure_root()
    assert first == second
    assert first.is_dir()
    assert resolver.resolve("https://x.test/a.png") == os.path.join(resolver.cache_root, "a.png")
