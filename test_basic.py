"""
Simple test to verify the library works correctly
"""

def test_imports():
    """Test that all modules can be imported"""
    from notion_sitemap import NotionClient, SitemapBuilder
    from notion_sitemap.client import NotionClient as ClientClass
    from notion_sitemap.cli import main
    print("✓ All imports successful")


def test_config_defaults():
    """Test configuration defaults"""
    from notion_sitemap import SitemapConfig

    config = SitemapConfig(root_id="root", token="secret")
    assert config.log_unsupported is False
    assert config.max_collection_members == 5
    assert config.suppress_over_limit is True
    assert config.max_depth is None
    assert config.validate() is config
    print("✓ Config defaults work")


def test_config_from_env():
    """Test configuration from environment variables"""
    from notion_sitemap import SitemapConfig

    config = SitemapConfig.from_env(
        {
            "NOTION_KEY": "secret",
            "SCRIPT_ID": "root",
            "SITEMAP_LOG_UNSUPPORTED": "true",
            "SITEMAP_MAX_COLLECTION_MEMBERS": "10",
            "SITEMAP_SUPPRESS_OVER_LIMIT": "no",
            "SITEMAP_MAX_DEPTH": "3",
        }
    )
    assert config.token == "secret"
    assert config.root_id == "root"
    assert config.log_unsupported is True
    assert config.max_collection_members == 10
    assert config.suppress_over_limit is False
    assert config.max_depth == 3

    alias = SitemapConfig.from_env({"NOTION_ROOT_ID": "other"})
    assert alias.root_id == "other"
    assert alias.token is None

    unlimited = SitemapConfig.from_env({"SITEMAP_MAX_DEPTH": "0"})
    assert unlimited.max_depth is None
    print("✓ Config from environment works")


def test_config_validation():
    """Test invalid configurations are rejected"""
    from notion_sitemap import ConfigurationError, SitemapConfig

    invalid = [
        SitemapConfig(token="secret"),
        SitemapConfig(root_id="root"),
        SitemapConfig(root_id="root", token="secret", max_collection_members=0),
        SitemapConfig(root_id="root", token="secret", max_depth=-1),
        SitemapConfig(root_id="root", token="secret", delay=-1.0),
    ]
    for config in invalid:
        try:
            config.validate()
        except ConfigurationError:
            continue
        raise AssertionError(f"{config} should be invalid")

    try:
        SitemapConfig.from_env({"SITEMAP_MAX_DEPTH": "deep"})
    except ConfigurationError:
        pass
    else:
        raise AssertionError("non-integer depth should be rejected")
    print("✓ Config validation works")


def test_result():
    """Test the Result value"""
    from notion_sitemap import ApiError, Result, UnknownError

    success = Result.success({"id": "p1"})
    assert success.ok
    assert success.unwrap_or({}) == {"id": "p1"}

    failure = Result.failure(ApiError("Not found", status=404, code="object_not_found"))
    assert not failure.ok
    assert failure.unwrap_or({}) == {}
    assert str(failure.error) == "Not found (status=404, code=object_not_found)"
    assert str(UnknownError("boom")) == "boom"
    print("✓ Result works")


def run_all_tests():
    """Run all tests"""
    print("Running tests...\n")

    tests = [
        test_imports,
        test_config_defaults,
        test_config_from_env,
        test_config_validation,
        test_result,
    ]

    for test in tests:
        try:
            test()
        except Exception as e:
            print(f"✗ {test.__name__} failed: {e}")
            import traceback
            traceback.print_exc()
            return False

    print("\n✓ All tests passed!")
    return True


if __name__ == "__main__":
    import sys
    success = run_all_tests()
    sys.exit(0 if success else 1)
