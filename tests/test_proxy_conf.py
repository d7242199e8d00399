import random
import string
from pathlib import Path

import pytest

from varkproxy.proxy_conf import (
    CACHE_FILE_NAME,
    NETAVARK_PROXY_RUN_DIR,
    NETAVARK_PROXY_RUN_DIR_ENV,
    PROXY_SOCK_NAME,
    get_cache_fqname,
    get_proxy_sock_fqname,
    get_run_dir,
)


def random_string(length):
    chars = string.ascii_letters + string.digits
    return "/" + "".join(random.choice(chars) for _ in range(length))


@pytest.fixture
def env_set(monkeypatch):
    value = random_string(25)
    monkeypatch.setenv(NETAVARK_PROXY_RUN_DIR_ENV, value)
    return value


@pytest.fixture
def env_unset(monkeypatch):
    monkeypatch.delenv(NETAVARK_PROXY_RUN_DIR_ENV, raising=False)


def test_run_dir_env(env_set):
    assert get_run_dir(None) == env_set


def test_run_dir_env_wins_over_option(env_set):
    assert get_run_dir("/other") == env_set


def test_run_dir_with_opt(env_unset):
    r = random_string(25)
    assert get_run_dir(r) == r


def test_run_dir_as_none(env_unset):
    assert get_run_dir(None) == NETAVARK_PROXY_RUN_DIR
    assert get_run_dir() == "/run/podman"


def test_get_cache_env(env_set):
    assert get_cache_fqname(None) == Path(env_set) / CACHE_FILE_NAME


def test_get_cache_with_opt(env_unset):
    r = random_string(25)
    assert get_cache_fqname(r) == Path(r) / CACHE_FILE_NAME


def test_get_cache_as_none(env_unset):
    assert get_cache_fqname(None) == Path(NETAVARK_PROXY_RUN_DIR) / CACHE_FILE_NAME
    assert str(get_cache_fqname()) == "/run/podman/nv-proxy.lease"


def test_get_proxy_sock_env(env_set):
    assert get_proxy_sock_fqname(None) == Path(env_set) / PROXY_SOCK_NAME


def test_get_proxy_sock_with_opt(env_unset):
    r = random_string(25)
    assert get_proxy_sock_fqname(r) == Path(r) / PROXY_SOCK_NAME


def test_get_proxy_sock_as_none(env_unset):
    assert get_proxy_sock_fqname(None) == Path(NETAVARK_PROXY_RUN_DIR) / PROXY_SOCK_NAME
    assert str(get_proxy_sock_fqname()) == "/run/podman/nv-proxy.sock"