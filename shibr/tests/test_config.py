from shibr.config import get_config, set_config_for_test


def test_defaults(monkeypatch):
    for var in ["DEFAULT_BRAND_SALES_COMMISSION", "DEFAULT_STORE_RENT_COMMISSION", "STRICT_INVENTORY_CHECK"]:
        monkeypatch.delenv(var, raising=False)
    set_config_for_test()
    config = get_config()
    assert config.default_brand_sales_commission == 8
    assert config.default_store_rent_commission == 10
    assert config.strict_inventory_check is False
    assert config.data_load_timeout_seconds == 10


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DEFAULT_BRAND_SALES_COMMISSION", "12.5")
    monkeypatch.setenv("STRICT_INVENTORY_CHECK", "true")
    set_config_for_test()
    config = get_config()
    assert config.default_brand_sales_commission == 12.5
    assert config.strict_inventory_check is True


def test_singleton():
    set_config_for_test(data_dir="elsewhere")
    assert get_config() is get_config()
    assert get_config().data_dir == "elsewhere"
