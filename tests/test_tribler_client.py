# tests/test_tribler_client.py
import pytest

from tribler_arr_shim.clients import TriblerClient
from tribler_arr_shim.config import TriblerConfig
from tribler_arr_shim.exceptions import (
    ConfigurationError,
    DecodeError,
    NotFound,
    RemoteEngineError,
    TransportError,
)

from tests.conftest import API_KEY, DOWNLOAD_DIR, make_download


@pytest.mark.asyncio
async def test_list_downloads(tribler_client, fake_tribler):
    fake_tribler.downloads = [make_download("aaa", status="SEEDING"), make_download("bbb")]

    downloads = await tribler_client.list_downloads()

    assert [d.infohash for d in downloads] == ["aaa", "bbb"]
    assert downloads[0].status == "SEEDING"
    assert downloads[0].destination == DOWNLOAD_DIR
    assert fake_tribler.requests[0]["api_key"] == API_KEY


@pytest.mark.asyncio
async def test_list_downloads_empty(tribler_client, fake_tribler):
    assert await tribler_client.list_downloads() == []


@pytest.mark.asyncio
async def test_list_downloads_accepts_infinite_eta(tribler_client, fake_tribler):
    fake_tribler.downloads = [make_download("aaa", eta=float("inf"))]

    downloads = await tribler_client.list_downloads()

    assert downloads[0].eta == float("inf")


@pytest.mark.asyncio
async def test_get_download(tribler_client, fake_tribler):
    fake_tribler.downloads = [make_download("aaa", name="Book.epub")]

    download = await tribler_client.get_download("aaa")

    assert download.name == "Book.epub"
    assert fake_tribler.requests[-1]["query"] == {"infohash": "aaa"}


@pytest.mark.asyncio
async def test_get_download_not_found(tribler_client, fake_tribler):
    fake_tribler.downloads = [make_download("aaa")]

    with pytest.raises(NotFound):
        await tribler_client.get_download("zzz")


@pytest.mark.asyncio
async def test_add_download(tribler_client, fake_tribler):
    infohash = await tribler_client.add_download("magnet:?xt=urn:btih:deadbeef&dn=Show")

    assert infohash == fake_tribler.next_infohash
    put = fake_tribler.calls("PUT")[0]
    assert put["path"] == "/downloads"
    assert put["body"] == {
        "anon_hops": 1,
        "safe_seeding": True,
        "uri": "magnet:?xt=urn:btih:deadbeef&dn=Show",
        "destination": DOWNLOAD_DIR,
    }


@pytest.mark.asyncio
async def test_add_download_without_infohash_is_decode_error(tribler_client, fake_tribler):
    fake_tribler.raw_body = '{"started": true}'

    with pytest.raises(DecodeError):
        await tribler_client.add_download("magnet:?xt=urn:btih:deadbeef")


@pytest.mark.asyncio
async def test_delete_download(tribler_client, fake_tribler):
    fake_tribler.downloads = [make_download("aaa")]

    await tribler_client.delete_download("aaa", remove_data=True)

    delete = fake_tribler.calls("DELETE")[0]
    assert delete["path"] == "/downloads/aaa"
    assert delete["body"] == {"remove_data": True}
    assert fake_tribler.downloads == []


@pytest.mark.asyncio
async def test_delete_unknown_download_is_remote_error(tribler_client, fake_tribler):
    with pytest.raises(RemoteEngineError) as exc_info:
        await tribler_client.delete_download("zzz")

    assert exc_info.value.status == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("state", ["stop", "resume", "recheck"])
async def test_update_download(tribler_client, fake_tribler, state):
    fake_tribler.downloads = [make_download("aaa")]

    await tribler_client.update_download("aaa", state)

    assert fake_tribler.states == {"aaa": state}


@pytest.mark.asyncio
async def test_update_download_rejects_unknown_state(tribler_client, fake_tribler):
    with pytest.raises(ValueError):
        await tribler_client.update_download("aaa", "explode")

    assert fake_tribler.requests == []


@pytest.mark.asyncio
async def test_get_files(tribler_client, fake_tribler):
    fake_tribler.downloads = [make_download("aaa")]
    fake_tribler.files["aaa"] = [
        {"index": 0, "name": "dir/a.mkv", "size": 100, "progress": 1.0, "included": True},
        {"index": 1, "name": "dir/a.nfo", "size": 2, "progress": 0.5, "included": False},
    ]

    files = await tribler_client.get_files("aaa")

    assert [(f.index, f.name, f.size) for f in files] == [(0, "dir/a.mkv", 100), (1, "dir/a.nfo", 2)]


@pytest.mark.asyncio
async def test_server_error_is_remote_error(tribler_client, fake_tribler):
    fake_tribler.fail_status = 500

    with pytest.raises(RemoteEngineError) as exc_info:
        await tribler_client.list_downloads()

    assert exc_info.value.status == 500
    assert "500" in exc_info.value.status_line
    assert exc_info.value.body == "engine exploded"


@pytest.mark.asyncio
async def test_wrong_api_key_is_remote_error(tribler_config, fake_tribler):
    client = TriblerClient(tribler_config.model_copy(update={"api_key": "wrong"}))
    try:
        with pytest.raises(RemoteEngineError) as exc_info:
            await client.list_downloads()
    finally:
        await client.close()

    assert exc_info.value.status == 401


@pytest.mark.asyncio
async def test_invalid_json_is_decode_error(tribler_client, fake_tribler):
    fake_tribler.raw_body = "<html>not json</html>"

    with pytest.raises(DecodeError):
        await tribler_client.list_downloads()


@pytest.mark.asyncio
async def test_unexpected_shape_is_decode_error(tribler_client, fake_tribler):
    fake_tribler.raw_body = '{"downloads": [{"name": "no infohash"}]}'

    with pytest.raises(DecodeError):
        await tribler_client.list_downloads()


@pytest.mark.asyncio
async def test_connection_refused_is_transport_error(unreachable_client):
    with pytest.raises(TransportError):
        await unreachable_client.list_downloads()


@pytest.mark.asyncio
async def test_timeout_is_transport_error(tribler_config, fake_tribler):
    fake_tribler.delay = 1
    client = TriblerClient(tribler_config.model_copy(update={"timeout": 0.2}))
    try:
        with pytest.raises(TransportError):
            await client.list_downloads()
    finally:
        await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["api_endpoint", "api_key"])
async def test_missing_configuration(missing):
    values = {"api_endpoint": "http://127.0.0.1:1", "api_key": API_KEY}
    values[missing] = ""
    client = TriblerClient(TriblerConfig(**values))
    try:
        with pytest.raises(ConfigurationError):
            await client.list_downloads()
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_connection_check(tribler_client, unreachable_client):
    assert await tribler_client.test_connection() is True
    assert await unreachable_client.test_connection() is False


@pytest.mark.asyncio
async def test_non_utf8_body_is_decode_error(tribler_client, fake_tribler):
    fake_tribler.raw_body = b'{"downloads": [{"infohash": "\xff\xfe"}]}'

    with pytest.raises(DecodeError):
        await tribler_client.list_downloads()


@pytest.mark.asyncio
async def test_get_files_unknown_download_is_not_found(tribler_client, fake_tribler):
    with pytest.raises(NotFound):
        await tribler_client.get_files("zzz")


@pytest.mark.asyncio
async def test_get_files_server_error_stays_remote_error(tribler_client, fake_tribler):
    fake_tribler.fail_status = 500

    with pytest.raises(RemoteEngineError):
        await tribler_client.get_files("aaa")


@pytest.mark.asyncio
@pytest.mark.parametrize("endpoint", ["tribler:20100", "ftp://tribler:20100", "http://"])
async def test_endpoint_without_http_scheme_is_configuration_error(endpoint, fake_tribler):
    client = TriblerClient(TriblerConfig(api_endpoint=endpoint, api_key=API_KEY))
    try:
        with pytest.raises(ConfigurationError):
            await client.list_downloads()
    finally:
        await client.close()

    assert fake_tribler.requests == []
