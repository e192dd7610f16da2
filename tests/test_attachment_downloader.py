import os

from udemy_downloader.downloader.attachment_downloader import AttachmentDownloader, AttachmentTask, plan_attachments
from udemy_downloader.models import Asset, Chapter, DownloadSummary, Lecture, Rendition
from udemy_downloader.utils.http_client import TransferError


class FakeAsyncClient:
    def __init__(self, files):
        self.files = files
        self.closed = False

    async def download_cdn_stream(self, url, dest_path):
        if url not in self.files:
            raise TransferError(f"Error while getting {url}: 404", status_code=404)
        with open(dest_path, "wb") as handle:
            handle.write(self.files[url])

    async def close_async(self):
        self.closed = True


def test_plan_attachments_skips_assets_without_urls(tmp_path):
    chapter = Chapter(display_index=3, title="Layouts")
    lecture = Lecture(
        id=1,
        display_index=7,
        title="Flexbox",
        has_video=True,
        primary_filename="flexbox.mp4",
        supplementary_assets=[
            Asset(
                title="flexbox-cheatsheet.pdf",
                kind="File",
                estimated_seconds=0,
                rendition_source="File",
                renditions=[Rendition(source_uri="http://host-name/cheatsheet.pdf", quality_label="download")],
            ),
            Asset(title="External link", kind="ExternalLink", estimated_seconds=0),
        ],
    )

    tasks = plan_attachments(str(tmp_path), chapter, lecture)

    assert len(tasks) == 1
    assert tasks[0].url == "http://host-name/cheatsheet.pdf"
    assert tasks[0].path == os.path.join(str(tmp_path), "007 flexbox-cheatsheet.pdf")


def test_download_continues_after_failure(tmp_path):
    client = FakeAsyncClient({"http://host-name/a.pdf": b"pdf-a", "http://host-name/c.zip": b"zip-c"})
    tasks = [
        AttachmentTask(title=name, url=f"http://host-name/{name}", path=str(tmp_path / name))
        for name in ("a.pdf", "b.pdf", "c.zip")
    ]
    summary = DownloadSummary()

    AttachmentDownloader(client, workers=2).download(tasks, summary)

    assert sorted(os.listdir(tmp_path)) == ["a.pdf", "c.zip"]
    assert (tmp_path / "c.zip").read_bytes() == b"zip-c"
    assert [title for title, _ in summary.failed] == ["b.pdf"]
    assert len(summary.downloaded) == 2
    assert client.closed is True
