import pytest

from sapconf_saptune_check.policy import SAPCONF, SAPTUNE, VersionPolicy, parse_os_version, parse_package_version


def test_parse_os_version():
    assert parse_os_version("12.3") == (12, 3)
    assert parse_os_version("15") == (15, None)
    assert parse_os_version(" 15.5 ") == (15, 5)
    assert parse_os_version("15-SP4") is None
    assert parse_os_version("") is None


def test_parse_package_version():
    assert parse_package_version("4.1.15") == (4, 1, 15)
    assert parse_package_version("5.0.5+git.1") == (5, 0, 5)
    assert parse_package_version("4.1") is None


@pytest.mark.parametrize("version_id", ["12.1", "12.2", "12.3", "12.4", "12.5", "15", "15.1", "15.6"])
def test_sapconf_supported_releases(version_id):
    assert VersionPolicy().is_subsystem_supported(SAPCONF, version_id)


@pytest.mark.parametrize("version_id", ["11.4", "12", "12.6", "16.0", "150", "tumbleweed", ""])
def test_sapconf_unsupported_releases(version_id):
    assert not VersionPolicy().is_subsystem_supported(SAPCONF, version_id)


def test_saptune_not_supported_on_sp1():
    policy = VersionPolicy()
    assert not policy.is_subsystem_supported(SAPTUNE, "12.1")
    assert policy.is_subsystem_supported(SAPTUNE, "12.2")
    assert policy.is_subsystem_supported(SAPTUNE, "15.3")


def test_reworked_gate_on_old_service_packs():
    policy = VersionPolicy()
    assert policy.is_package_version_reworked("12.2", "4.1.15")
    assert policy.is_package_version_reworked("12.3", "4.1.12")
    assert not policy.is_package_version_reworked("12.2", "4.0.3")
    assert not policy.is_package_version_reworked("12.1", "4.1.5")
    assert not policy.is_package_version_reworked("12.1", "4.2.12")


def test_newer_releases_are_always_reworked():
    policy = VersionPolicy()
    assert policy.is_package_version_reworked("12.4", "4.0.1")
    assert policy.is_package_version_reworked("15.2", "whatever")


def test_unsupported_release_is_never_reworked():
    assert not VersionPolicy().is_package_version_reworked("11.4", "4.1.15")


def test_unknown_subsystem_rejected():
    with pytest.raises(ValueError):
        VersionPolicy().is_subsystem_supported("tuned", "15.4")
