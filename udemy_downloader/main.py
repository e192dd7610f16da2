from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from .api.auth_api import AuthAPI
from .api.course_api import CourseAPI
from .api.lecture_api import LectureAPI
from .downloader.attachment_downloader import AttachmentDownloader
from .downloader.lecture_downloader import LectureDownloader
from .downloader.media_fetcher import MediaFetcher
from .models import Course, CurriculumTree
from .parser import CurriculumParser
from .utils.course_url import parse_course_url
from .utils.http_client import AuthenticationError, HttpClient
from .utils.token_cache import (
    DEFAULT_CACHE_PATH,
    clear_cached_token,
    load_cached_token,
    save_cached_token,
)

load_dotenv()


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value


def _env_int(name: str) -> int | None:
    value = _env_str(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _env_bool(name: str) -> bool:
    value = _env_str(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="udemy-dl", description="Download Udemy course videos.")
    parser.add_argument("-u", "--url", default=_env_str("UDEMY_URL"), help="URL of the course to download")
    parser.add_argument("-t", "--access-token", default=_env_str("ACCESS_TOKEN"), help="Access token to authenticate to udemy")
    parser.add_argument("-U", "--username", default=_env_str("UDEMY_USERNAME"), help="Username to authenticate to udemy")
    parser.add_argument("-p", "--password", default=_env_str("UDEMY_PASSWORD"), help="Password to authenticate to udemy")
    parser.add_argument("-v", "--verbose", action="store_true", default=_env_bool("VERBOSE"), help="Log debug output")
    token_cache_env = _env_str("TOKEN_CACHE")
    parser.add_argument(
        "--token-cache",
        default=os.path.expanduser(token_cache_env) if token_cache_env else DEFAULT_CACHE_PATH,
        help="File to persist the access token between runs",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    info = subparsers.add_parser("info", help="Query course information")
    info.add_argument("-s", "--save", help="Save the curriculum json to a file")

    download = subparsers.add_parser("download", help="Download course content")
    download.add_argument("-d", "--dry-run", action="store_true", help="Show what would be done but don't download anything")
    download.add_argument("-c", "--chapter", type=int, help="Restrict downloads to a specific chapter")
    download.add_argument("-l", "--lecture", type=int, help="Restrict downloads to a specific lecture")
    download.add_argument("-q", "--quality", type=int, default=_env_int("QUALITY"), help="Lowest acceptable video quality, e.g. 720")
    download.add_argument("-i", "--info", help="Load the curriculum from a file saved with 'info --save'")
    download.add_argument("-o", "--output", default=_env_str("OUTPUT_DIR") or ".", help="Directory where to output downloaded files")
    download.add_argument("-a", "--attachments", action="store_true", help="Also download lecture attachments")
    download.add_argument("-w", "--workers", type=int, default=_env_int("WORKERS") or 4, help="Concurrent attachment downloads")

    complete = subparsers.add_parser("complete", help="Mark lectures as completed")
    complete.add_argument("-c", "--chapter", type=int, required=True, help="Chapter whose lectures are marked")
    complete.add_argument("-l", "--lecture", type=int, help="Restrict marking to a specific lecture")

    args = parser.parse_args(argv)
    if not args.url:
        parser.error("--url is required")
    return args


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def resolve_access_token(args: argparse.Namespace) -> str | None:
    if args.access_token:
        return args.access_token

    cached_token = load_cached_token(args.token_cache)
    if cached_token:
        return cached_token

    if args.username and args.password:
        logging.info("Attempting login for %s", args.username)
        with HttpClient() as auth_client:
            try:
                login_result = AuthAPI(auth_client).login(args.username, args.password)
            except Exception as exc:
                logging.error("Login failed: %s", exc)
                return None
        save_cached_token(args.token_cache, login_result.access_token, login_result.username)
        return login_result.access_token

    logging.error("Either --access-token, a cached token, or --username/--password must be provided.")
    return None


def print_course_content(tree: CurriculumTree) -> None:
    for chapter in tree.chapters:
        logging.info("%03d Chapter %s", chapter.display_index, chapter.title)
        for lecture in chapter.lectures:
            logging.info("\t%03d Lecture %s", lecture.display_index, lecture.title)


def load_curriculum_json(args: argparse.Namespace, course_api: CourseAPI, course: Course) -> str:
    info_file = getattr(args, "info", None)
    if info_file:
        logging.info("Loading course info from %s", info_file)
        with open(info_file, "r", encoding="utf-8") as handle:
            return handle.read()
    return course_api.get_curriculum_json(course.id)


def mark_lectures_complete(
    lecture_api: LectureAPI,
    course: Course,
    tree: CurriculumTree,
    wanted_chapter: int,
    wanted_lecture: Optional[int] = None,
) -> List[Tuple[str, str]]:
    """Mark the lectures of one chapter complete; returns the failures."""

    failures: List[Tuple[str, str]] = []
    for chapter in tree.chapters:
        if chapter.display_index != wanted_chapter:
            continue
        logging.info("Completing chapter %s - %s", chapter.display_index, chapter.title)
        for lecture in chapter.lectures:
            if wanted_lecture is not None and lecture.display_index != wanted_lecture:
                continue
            logging.debug("Completing lecture %s", lecture.title)
            try:
                lecture_api.mark_complete(course.id, lecture.id)
            except AuthenticationError:
                raise
            except Exception as exc:
                logging.error("Error while completing %s: %s", lecture.title, exc)
                failures.append((lecture.title, str(exc)))
    return failures


def run(args: argparse.Namespace, http_client: HttpClient) -> int:
    course_url = parse_course_url(args.url)
    parser = CurriculumParser()
    course_api = CourseAPI(http_client, course_url.portal_name, parser)
    lecture_api = LectureAPI(http_client, course_url.portal_name, parser)

    course = course_api.find_subscribed_course(course_url.course_name)
    raw_curriculum = load_curriculum_json(args, course_api, course)
    tree = parser.parse_document(json.loads(raw_curriculum))

    if args.command == "info":
        print_course_content(tree)
        if args.save:
            with open(args.save, "w", encoding="utf-8") as handle:
                handle.write(raw_curriculum)
            logging.info("Saved course info to %s", args.save)
        return 0

    if args.command == "complete":
        failures = mark_lectures_complete(lecture_api, course, tree, args.chapter, args.lecture)
        return 1 if failures else 0

    attachment_downloader = AttachmentDownloader(http_client, workers=args.workers) if args.attachments else None
    downloader = LectureDownloader(lecture_api, MediaFetcher(http_client), attachment_downloader)
    summary = downloader.download(
        course,
        tree,
        args.output,
        wanted_chapter=args.chapter,
        wanted_lecture=args.lecture,
        wanted_quality=args.quality,
        dry_run=args.dry_run,
    )
    return 1 if summary.failed else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    access_token = resolve_access_token(args)
    if not access_token:
        return 1

    with HttpClient(access_token=access_token) as http_client:
        try:
            return run(args, http_client)
        except AuthenticationError as exc:
            clear_cached_token(args.token_cache)
            logging.error("%s", exc)
        except Exception as exc:
            logging.error("An error occurred: %s", exc)
    return 1


if __name__ == "__main__":
    sys.exit(main())
