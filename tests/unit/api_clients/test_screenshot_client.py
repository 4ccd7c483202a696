"""Unit tests for Screenshot operations and handles."""

import json

import pytest

from diffy.api_clients import (
    DataNotLoadedError,
    InvalidArgumentsError,
    Screenshot,
    SnapshotState,
)


@pytest.fixture
def screenshot_files(tmp_path):
    """Two PNG-looking files on disk."""
    paths = []
    for name in ("home.png", "about.png"):
        path = tmp_path / name
        path.write_bytes(b"\x89PNG-" + name.encode())
        paths.append(str(path))
    return paths


class TestScreenshotCreate:
    """Test creating screenshot sets."""

    def test_create_posts_environment(self, api_client, httpx_mock, base_url):
        """Test that create posts the environment."""
        httpx_mock.add_response(
            method="POST", url=f"{base_url}projects/42/screenshots", json={"id": 300}
        )

        result = Screenshot.create(api_client, 42, "production")

        request = httpx_mock.get_requests()[-1]
        assert json.loads(request.content) == {"environment": "production"}
        assert result == {"id": 300}

    def test_create_accepts_upload_type(self, api_client, httpx_mock, base_url):
        """Test that upload is part of the accepted types."""
        httpx_mock.add_response(
            method="POST", url=f"{base_url}projects/42/screenshots", json={}
        )

        Screenshot.create(api_client, 42, "upload")

    def test_create_rejects_unknown_environment(self, api_client, api_paths):
        """Test that an unknown environment sends nothing."""
        with pytest.raises(InvalidArgumentsError, match='"bogus" is not a valid'):
            Screenshot.create(api_client, 42, "bogus")

        assert api_paths() == ["/api/auth/key"]

    def test_create_rejects_empty_project_id(self, api_client, api_paths):
        """Test that a zero project ID sends nothing."""
        with pytest.raises(InvalidArgumentsError, match="Project ID can not be empty"):
            Screenshot.create(api_client, 0, "production")

        assert api_paths() == ["/api/auth/key"]


class TestSetBaselineSet:
    """Test marking a screenshot set as baseline."""

    def test_set_baseline_set_puts_without_body(self, api_client, httpx_mock, base_url):
        """Test that the baseline call is a bodiless PUT."""
        httpx_mock.add_response(
            method="PUT",
            url=f"{base_url}projects/42/set-base-line-set/300",
            json={"status": "ok"},
        )

        result = Screenshot.set_baseline_set(api_client, 42, 300)

        request = httpx_mock.get_requests()[-1]
        assert request.content == b""
        assert result == {"status": "ok"}

    def test_set_baseline_set_rejects_empty_screenshot_id(self, api_client, api_paths):
        """Test that the screenshot ID is required."""
        with pytest.raises(InvalidArgumentsError, match="Screenshot ID"):
            Screenshot.set_baseline_set(api_client, 42, 0)

        assert api_paths() == ["/api/auth/key"]


class TestScreenshotHandle:
    """Test retrieving, refreshing and reading screenshot sets."""

    def test_retrieve_and_estimate(self, api_client, httpx_mock, base_url):
        """Test that retrieve loads state and estimate."""
        httpx_mock.add_response(
            method="GET",
            url=f"{base_url}snapshots/300",
            json={"id": 300, "state": 1, "status": {"estimate": 120, "done": 4}},
        )

        screenshot = Screenshot.retrieve(api_client, 300)

        assert screenshot.screenshot_id == 300
        assert screenshot.state == SnapshotState.PROGRESS
        assert screenshot.get_estimate() == 120
        assert not screenshot.is_completed()
        assert screenshot.data["status"]["done"] == 4

    def test_refresh_returns_new_handle(self, api_client, httpx_mock, base_url):
        """Test that refresh fetches the latest state into a new handle."""
        httpx_mock.add_response(
            method="GET",
            url=f"{base_url}snapshots/300",
            json={"state": 1, "status": {"estimate": 60}},
        )
        httpx_mock.add_response(
            method="GET", url=f"{base_url}snapshots/300", json={"state": 3}
        )

        screenshot = Screenshot.retrieve(api_client, 300)
        refreshed = screenshot.refresh()

        assert refreshed.data == {"state": 3}
        assert refreshed.is_completed()
        assert screenshot.get_estimate() == 60

    @pytest.mark.parametrize(
        "state,completed",
        [(0, False), (1, False), (2, True), (3, True), (4, True)],
    )
    def test_is_completed_terminal_states(self, api_client, state, completed):
        """Test the screenshot terminal set."""
        screenshot = Screenshot(
            client=api_client,
            resource_id=300,
            data={"state": state},
            record=Screenshot.RECORD_TYPE.model_validate({"state": state}),
        )

        assert screenshot.is_completed() is completed

    def test_get_estimate_without_data_raises(self, api_client):
        """Test that reading the estimate of an unloaded handle fails."""
        screenshot = Screenshot(client=api_client, resource_id=300)

        with pytest.raises(DataNotLoadedError):
            screenshot.get_estimate()

    def test_get_estimate_without_status_raises(self, api_client, httpx_mock, base_url):
        """Test that a record without status.estimate raises a lookup error."""
        httpx_mock.add_response(
            method="GET", url=f"{base_url}snapshots/300", json={"state": 0}
        )

        screenshot = Screenshot.retrieve(api_client, 300)

        with pytest.raises(LookupError, match="no status estimate"):
            screenshot.get_estimate()


class TestCreateUpload:
    """Test creating screenshot sets from files."""

    def test_create_upload_sends_multipart(
        self, api_client, httpx_mock, base_url, screenshot_files
    ):
        """Test that fields and files are encoded as indexed parts."""
        httpx_mock.add_response(
            method="POST",
            url=f"{base_url}projects/42/create-custom-snapshot",
            json={"id": 301},
        )

        result = Screenshot.create_upload(
            api_client,
            42,
            {
                "snapshotName": "Release 1.2",
                "files": screenshot_files,
                "breakpoints": [1200, 640],
                "urls": ["https://example.com/", "https://example.com/about"],
            },
        )

        request = httpx_mock.get_requests()[-1]
        body = request.read()
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert result == {"id": 301}
        order = [
            b'name="snapshotName"',
            b'name="breakpoints[0]"',
            b'name="breakpoints[1]"',
            b'name="urls[0]"',
            b'name="urls[1]"',
            b'name="files[0]"; filename="home.png"',
            b'name="files[1]"; filename="about.png"',
        ]
        positions = [body.index(marker) for marker in order]
        assert positions == sorted(positions)
        assert b"Release 1.2" in body
        assert b"https://example.com/about" in body
        assert b"\x89PNG-home.png" in body
        assert b"Content-Type: multipart/form-data" in body

    def test_create_upload_rejects_mismatched_lengths(self, api_client, api_paths):
        """Test that length mismatch is detected before checking files."""
        with pytest.raises(InvalidArgumentsError, match="should be the same"):
            Screenshot.create_upload(
                api_client,
                42,
                {
                    "snapshotName": "Release",
                    "files": ["a.png", "b.png"],
                    "breakpoints": [1200, 640, 320],
                    "urls": ["u1", "u2", "u3"],
                },
            )

        assert api_paths() == ["/api/auth/key"]

    def test_create_upload_rejects_missing_file(
        self, api_client, api_paths, screenshot_files, tmp_path
    ):
        """Test that a nonexistent path is named in the error."""
        missing = str(tmp_path / "missing.png")

        with pytest.raises(InvalidArgumentsError, match="missing.png can not be found"):
            Screenshot.create_upload(
                api_client,
                42,
                {
                    "snapshotName": "Release",
                    "files": [screenshot_files[0], missing],
                    "breakpoints": [1200, 640],
                    "urls": ["u1", "u2"],
                },
            )

        assert api_paths() == ["/api/auth/key"]

    @pytest.mark.parametrize(
        "upload,message",
        [
            ({"snapshotName": "x", "breakpoints": [], "urls": []}, '"files"'),
            ({"files": "a.png", "snapshotName": "x"}, '"files"'),
            (
                {"files": [], "snapshotName": "", "breakpoints": [], "urls": []},
                '"snapshotName"',
            ),
            ({"files": [], "snapshotName": "x", "urls": []}, '"breakpoints"'),
            ({"files": [], "snapshotName": "x", "breakpoints": []}, '"urls"'),
        ],
    )
    def test_create_upload_validates_properties(
        self, api_client, api_paths, upload, message
    ):
        """Test that each required property is checked."""
        with pytest.raises(InvalidArgumentsError, match=message):
            Screenshot.create_upload(api_client, 42, upload)

        assert api_paths() == ["/api/auth/key"]


class TestBrowserStackScreenshot:
    """Test creating screenshot sets from BrowserStack."""

    def test_posts_screenshots(self, api_client, httpx_mock, base_url):
        """Test that the screenshot list is posted as JSON."""
        httpx_mock.add_response(
            method="POST",
            url=f"{base_url}projects/42/create-browser-stack-screenshot",
            json={"id": 302},
        )
        screenshots = [{"url": "https://example.com/", "browser": "chrome"}]

        result = Screenshot.create_browser_stack_screenshot(api_client, 42, screenshots)

        request = httpx_mock.get_requests()[-1]
        assert json.loads(request.content) == {"screenshots": screenshots}
        assert result == {"id": 302}

    def test_rejects_empty_list(self, api_client, api_paths):
        """Test that an empty screenshot list is rejected."""
        with pytest.raises(InvalidArgumentsError, match="Screenshots list"):
            Screenshot.create_browser_stack_screenshot(api_client, 42, [])

        assert api_paths() == ["/api/auth/key"]


class TestCustomScreenshot:
    """Test creating screenshot sets with custom files."""

    def test_sends_indexed_fields(self, api_client, httpx_mock, base_url):
        """Test that each item becomes files/urls/breakpoints fields."""
        httpx_mock.add_response(
            method="POST",
            url=f"{base_url}projects/42/create-custom-snapshot",
            json={"id": 303},
        )

        result = Screenshot.create_custom_screenshot(
            api_client,
            42,
            [
                {"file": "https://cdn.example.com/a.png", "url": "/", "breakpoint": 1},
                {"file": "https://cdn.example.com/b.png", "url": "/b", "breakpoint": 3},
            ],
            "Custom run",
        )

        body = httpx_mock.get_requests()[-1].read()
        order = [
            b'name="snapshotName"',
            b'name="files[0]"',
            b'name="urls[0]"',
            b'name="breakpoints[0]"',
            b'name="files[1]"',
            b'name="urls[1]"',
            b'name="breakpoints[1]"',
        ]
        positions = [body.index(marker) for marker in order]
        assert positions == sorted(positions)
        assert b"Custom run" in body
        assert b"https://cdn.example.com/b.png" in body
        assert b"filename=" not in body
        assert result == {"id": 303}

    def test_rejects_incomplete_item(self, api_client, api_paths):
        """Test that an item missing a key describes the expected shape."""
        with pytest.raises(InvalidArgumentsError, match="'breakpoint'"):
            Screenshot.create_custom_screenshot(
                api_client, 42, [{"file": "a.png", "url": "/", "breakpoint": ""}], "x"
            )

        assert api_paths() == ["/api/auth/key"]

    def test_rejects_empty_data(self, api_client, api_paths):
        """Test that an empty data list is rejected."""
        with pytest.raises(InvalidArgumentsError, match="Data list can not be empty"):
            Screenshot.create_custom_screenshot(api_client, 42, [], "x")

        assert api_paths() == ["/api/auth/key"]
