"""
aiaio_core.cli
==============

`aiaio-admin`: operator commands over the hosted database and buckets.

Each subcommand is a thin wrapper: it fetches a client, calls one function
of the package and prints the result. Commands that write accept
`--dry-run` (show what would change) and `--yes` (skip the confirmation
prompt).

Exit status is 1 when a command fails with an `AdminError`.
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, Dict, List, Optional

from . import children as children_mod
from .assets import maintenance, matching, review
from .config import configure_logging, get_settings
from .db import repository as repo
from .db.client import get_supabase_client
from .domain_models import Asset
from .errors import AdminError
from .prompts import PROMPT_SAFE_ZONES, PROMPT_TEMPLATES, PromptContext, generate_prompts, save_prompts
from .storage.s3 import S3VideoManager, create_s3_client, format_file_size
from .videos import approval, assignments, coverage, playlists, render_jobs, sync, timeline


def _confirm(args: argparse.Namespace, message: str) -> bool:
    if args.yes:
        return True
    answer = input(f"\n⚠️  {message} (y/n): ").strip().lower()
    if answer != "y":
        print("❌ Cancelled.")
        return False
    return True


def _print_report(title: str, report: maintenance.PatchReport) -> None:
    verb = "Would update" if report.dry_run else "Updated"
    print(f"\n📊 {title}")
    print(f"   {verb}: {len(report.updated)}")
    print(f"   Skipped: {len(report.skipped)}")
    if report.failed:
        print(f"   ❌ Failed: {len(report.failed)}")
        for asset_id in report.failed:
            print(f"      - {asset_id}")


def _run_patch(args: argparse.Namespace, title: str, patch: Callable[..., maintenance.PatchReport]) -> None:
    client = get_supabase_client()
    preview = patch(client, dry_run=True)
    _print_report(f"{title} (preview)", preview)

    if args.dry_run or not preview.updated:
        return
    if not _confirm(args, f"Apply to {len(preview.updated)} assets?"):
        return
    _print_report(title, patch(client, dry_run=False))


# ============================================================
# Assets
# ============================================================

def cmd_approve_asset(args: argparse.Namespace) -> None:
    row = review.approve_asset(
        get_supabase_client(),
        args.asset_id,
        reviewer=args.reviewer,
        safe_zones=args.safe_zone or None,
        notes=args.notes,
    )
    print(f"✅ Asset {row['id']} approved ({row.get('theme')})")


def cmd_reject_asset(args: argparse.Namespace) -> None:
    row = review.reject_asset(get_supabase_client(), args.asset_id, args.reason, reviewer=args.reviewer)
    print(f"✅ Asset {row['id']} rejected: {args.reason}")


def cmd_pending_assets(args: argparse.Namespace) -> None:
    rows = review.list_pending_assets(get_supabase_client(), asset_type=args.type, limit=args.limit)
    print(f"🔍 {len(rows)} pending assets")
    for row in rows:
        asset = Asset.from_row(row)
        print(f"- {asset.id} [{asset.type}] {asset.theme} (template: {asset.template or '-'}, created {asset.created_at})")


def cmd_asset_stats(args: argparse.Namespace) -> None:
    rows = repo.list_assets(get_supabase_client(), template=args.template, asset_type=args.type)
    stats = review.asset_stats(rows)
    print("📊 Asset stats")
    for key, value in stats.items():
        print(f"   {key}: {value}")


def cmd_letter_hunt_assets(args: argparse.Namespace) -> None:
    rows = repo.list_assets(get_supabase_client(), status="approved", template="letter-hunt")
    found = matching.find_letter_hunt_assets(rows, args.letter, child_name=args.child)
    print(f"🔍 Letter-hunt assets for letter {args.letter.upper()}")
    for slot, asset in found.items():
        if asset is None:
            print(f"   ❌ {slot}: missing")
        else:
            owner = asset.child_name or "generic"
            print(f"   ✅ {slot}: {asset.id} ({owner}) {asset.file_url}")

    missing = matching.missing_letter_hunt_slots(found)
    if missing:
        print(f"\n⚠️  Missing slots: {', '.join(missing)}")


def cmd_letter_hunt_audit(args: argparse.Namespace) -> None:
    client = get_supabase_client()
    audio = repo.list_assets(client, asset_type="audio", template="letter-hunt")
    images = repo.list_assets(client, asset_type="image", template="letter-hunt")
    audit = matching.audit_letter_hunt_metadata(audio, images)

    print(f"🔍 {len(audio)} letter-hunt audio assets")
    for row in audio:
        asset = Asset.from_row(row)
        print(f"   {matching.purpose_status_marker(asset)} {asset.id} {asset.theme} -> {asset.asset_purpose or '-'}")

    print(f"\n📊 Audio without purpose: {len(audit['audio_missing_purpose'])}")
    print(f"📊 Images without imageType: {len(audit['image_missing_type'])}")
    for asset in audit["image_missing_type"]:
        print(f"   ❌ {asset.id} {asset.theme}")


def cmd_fix_letter_audio(args: argparse.Namespace) -> None:
    _run_patch(args, "Letter audio extensions", maintenance.fix_letter_audio_extensions)


def cmd_tag_ending_videos(args: argparse.Namespace) -> None:
    _run_patch(args, "Ending video tags", maintenance.tag_ending_videos)


def cmd_backfill_purpose(args: argparse.Namespace) -> None:
    def patch(client, dry_run=False):
        return maintenance.backfill_asset_purpose(client, args.template, dry_run=dry_run)

    _run_patch(args, f"assetPurpose backfill ({args.template})", patch)


# ============================================================
# Children
# ============================================================

def cmd_children_by_initial(args: argparse.Namespace) -> None:
    rows = repo.list_children(get_supabase_client(), columns="id, name, parent_id, created_at")
    if args.letter:
        matches = children_mod.children_starting_with(rows, args.letter)
        print(f"🔍 {len(matches)} children starting with {args.letter.upper()}")
        for child in matches:
            print(f"   - {child['name']} ({child['id']})")
        return

    for initial, group in children_mod.group_by_initial(rows).items():
        names = ", ".join(c["name"] for c in group)
        print(f"{initial}: {len(group)} ({names})")


def cmd_child_name_matching(args: argparse.Namespace) -> None:
    client = get_supabase_client()
    rows = repo.list_children(client, columns="id, name, age, primary_interest")
    videos = repo.list_approved_videos(
        client,
        statuses=["approved"],
        columns="child_id, child_name, template_type, approval_status, created_at",
    )
    print(f"📊 {len(rows)} children, {len(videos)} approved videos")
    for match in children_mod.match_videos_to_children(rows, videos):
        print(f"- \"{match.child_name}\": {len(match.videos)} videos")
        if match.matched:
            print(f"  ✅ Matches child ID: {match.child['id']}")
        else:
            print("  ❌ No matching child found in children table")


def cmd_cleanup_duplicates(args: argparse.Namespace) -> None:
    client = get_supabase_client()
    ids = children_mod.cleanup_duplicate_children(client, dry_run=True)
    print(f"🔍 {len(ids)} duplicate children")
    if not ids or args.dry_run:
        return
    if _confirm(args, f"Delete {len(ids)} children?"):
        repo.delete_children(client, ids)
        print(f"✅ Deleted {len(ids)} duplicates")


def cmd_cleanup_orphans(args: argparse.Namespace) -> None:
    client = get_supabase_client()
    ids = children_mod.cleanup_orphaned_children(client, dry_run=True)
    print(f"🔍 {len(ids)} orphaned children")
    if not ids or args.dry_run:
        return
    if _confirm(args, f"Delete {len(ids)} children?"):
        repo.delete_children(client, ids)
        print(f"✅ Deleted {len(ids)} orphaned children")


# ============================================================
# Videos
# ============================================================

def cmd_update_playlists(args: argparse.Namespace) -> None:
    written = playlists.update_child_playlists(get_supabase_client())
    print(f"✅ Updated {len(written)} playlists")
    for child_id, count in written.items():
        print(f"   {child_id}: {count} videos")


def cmd_missing_videos(args: argparse.Namespace) -> None:
    report = coverage.check_missing_videos(
        get_supabase_client(),
        template_type=args.template,
        days_threshold=args.days,
    )
    print(f"📊 {report.summary}")
    for child in report.missing:
        print(f"   ⚠️  {child.name}: {child.missing_reason}")
    print(f"\n   No videos: {report.total_with_no_videos}")
    print(f"   Old videos: {report.total_with_old_videos}")


def cmd_misassigned_videos(args: argparse.Namespace) -> None:
    suspicious = assignments.check_misassigned_videos(get_supabase_client())
    if not suspicious:
        print("✅ No obviously misassigned letter-specific videos found.")
        return

    print(f"⚠️  Found {len(suspicious)} potentially misassigned videos:")
    for i, item in enumerate(suspicious, 1):
        print(f"\n   {i}. \"{item.video_title}\"")
        print(f"      Video ID: {item.video_id}")
        print(f"      Child Name: {item.child_name}")
        print(f"      Reasons: {', '.join(item.reasons)}")


def cmd_approve_video(args: argparse.Namespace) -> None:
    result = approval.approve_video_with_migration(get_supabase_client(), create_s3_client(), args.video_id)
    print(f"✅ Video approved: {result['new_url']}")


def cmd_job_status(args: argparse.Namespace) -> None:
    status = render_jobs.get_job_status(get_supabase_client(), args.render_id)
    print(f"🔍 Job {status['job_id']}")
    print(f"   Status: {status['status']}")
    for name, value in status["timestamps"].items():
        print(f"   {name}: {value or '-'}")
    print(f"   Render ID: {status['render_id'] or 'None'}")
    print(f"   Output URL: {status['output_url'] or 'None'}")
    if status["error_message"]:
        print(f"   ❌ Error: {status['error_message']}")


def cmd_s3_sync(args: argparse.Namespace) -> None:
    report = sync.check_s3_database_sync(get_supabase_client(), create_s3_client())
    print(f"📊 {report.total_videos} videos in database, {report.total_objects} objects in bucket")
    for source, count in report.by_source.items():
        print(f"   source {source}: {count}")
    for kind, count in report.by_url_kind.items():
        print(f"   {kind} URLs: {count}")

    if report.in_sync:
        print("✅ All videos with public URLs have files in the bucket")
        return
    print(f"❌ {len(report.missing_in_bucket)} videos point at missing files:")
    for video in report.missing_in_bucket:
        print(f"   - {video.get('video_title')}: {video['expected_key']}")


def cmd_timeline(args: argparse.Namespace) -> None:
    if args.template == "name-video":
        frames = timeline.name_video_duration(args.child_name)
        print(f"🎬 name-video for {args.child_name or '(no name)'}: {frames} frames ({frames / timeline.NAME_VIDEO_FPS:.1f}s)")
        return
    if args.template == "lullaby":
        frames = timeline.lullaby_duration(args.seconds or timeline.LULLABY_DEFAULT_SECONDS)
        print(f"🎬 lullaby: {frames} frames at {timeline.LULLABY_FPS} fps")
        return

    fps = timeline.LETTER_HUNT_FPS
    segments = timeline.letter_hunt_segments()
    for i, segment in enumerate(segments, 1):
        start, duration, end = segment.seconds(fps)
        print(
            f"{i}. {segment.name:<12} | start {segment.start:>4} ({start:.1f}s)"
            f" | {segment.duration} frames ({duration:.1f}s) | end {segment.end:>4} ({end:.1f}s)"
        )
    total = timeline.total_frames(segments)
    print(f"\n🕐 Total: {total} frames = {total / fps:.1f} seconds")

    if args.check_seconds is not None:
        near = timeline.segments_ending_near(segments, args.check_seconds, fps)
        for segment in near:
            print(f"⚠️  {segment.name} ends at {segment.end / fps:.1f}s")
        if not near:
            print(f"✅ No segment ends near {args.check_seconds}s")


# ============================================================
# Storage
# ============================================================

def cmd_storage_stats(args: argparse.Namespace) -> None:
    stats = S3VideoManager().storage_stats()
    print(f"📊 {stats['total_objects']} videos, {format_file_size(stats['total_size'])}")
    print(f"   Estimated monthly cost: ${stats['estimated_monthly_cost']:.2f}")
    for storage_class, item in stats["storage_breakdown"].items():
        print(f"   {storage_class}: {item['count']} ({format_file_size(item['size'])})")


def cmd_cleanup_temp_videos(args: argparse.Namespace) -> None:
    manager = S3VideoManager()
    if args.dry_run:
        expired = manager.expired_temp_videos(args.days)
        print(f"🔍 {len(expired)} temp videos older than {args.days} days would be deleted")
        for video in expired:
            print(f"   - {video.key} ({video.last_modified:%Y-%m-%d})")
        return
    if _confirm(args, f"Delete temp videos older than {args.days} days?"):
        print(f"✅ Deleted {manager.cleanup_temp_videos(args.days)} temp videos")


# ============================================================
# Prompts
# ============================================================

def cmd_generate_prompts(args: argparse.Namespace) -> None:
    generated: Dict[str, dict] = {}
    for safe_zone in args.safe_zone or [None]:
        context = PromptContext(
            theme=args.theme,
            age_range=args.age_range,
            template=args.template,
            child_name=args.child_name,
            personalization="personalized" if args.child_name else "general",
            safe_zone=safe_zone,
            aspect_ratio=args.aspect_ratio,
            art_style=args.art_style,
            prompt_count=args.count,
        )
        result = generate_prompts(context)
        generated[result["metadata"]["safeZone"]] = result

    for safe_zone, result in generated.items():
        print(f"\n🖼️  {safe_zone}")
        for i, prompt in enumerate(result["images"], 1):
            print(f"{i}. {prompt}")

    if args.save:
        saved = save_prompts(get_supabase_client(), generated)
        print(f"\n✅ Saved {len(saved)} prompts")


# ============================================================
# Parser
# ============================================================

def _writes(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument("--dry-run", action="store_true", help="Show what would change without writing")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    return parser


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="aiaio-admin", description="Admin tooling for the aiaio platform")
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("approve-asset", help="Approve a pending asset")
    p.add_argument("asset_id")
    p.add_argument("--reviewer")
    p.add_argument("--safe-zone", action="append")
    p.add_argument("--notes")
    p.set_defaults(func=cmd_approve_asset)

    p = sub.add_parser("reject-asset", help="Reject a pending asset")
    p.add_argument("asset_id")
    p.add_argument("--reason", required=True)
    p.add_argument("--reviewer")
    p.set_defaults(func=cmd_reject_asset)

    p = sub.add_parser("pending-assets", help="List pending assets")
    p.add_argument("--type")
    p.add_argument("--limit", type=int, default=10)
    p.set_defaults(func=cmd_pending_assets)

    p = sub.add_parser("asset-stats", help="Count assets by status")
    p.add_argument("--template")
    p.add_argument("--type")
    p.set_defaults(func=cmd_asset_stats)

    p = sub.add_parser("children-by-initial", help="Group children by first letter")
    p.add_argument("--letter")
    p.set_defaults(func=cmd_children_by_initial)

    p = sub.add_parser("child-name-matching", help="Match approved videos to children by name")
    p.set_defaults(func=cmd_child_name_matching)

    p = sub.add_parser("letter-hunt-assets", help="Show the letter-hunt images for a letter")
    p.add_argument("--letter", required=True)
    p.add_argument("--child")
    p.set_defaults(func=cmd_letter_hunt_assets)

    p = sub.add_parser("letter-hunt-audit", help="Find letter-hunt assets with incomplete metadata")
    p.set_defaults(func=cmd_letter_hunt_audit)

    p = _writes(sub.add_parser("cleanup-duplicates", help="Delete duplicate children"))
    p.set_defaults(func=cmd_cleanup_duplicates)

    p = _writes(sub.add_parser("cleanup-orphans", help="Delete children without a parent user"))
    p.set_defaults(func=cmd_cleanup_orphans)

    p = _writes(sub.add_parser("fix-letter-audio", help="Point letter audio at .mp3 files"))
    p.set_defaults(func=cmd_fix_letter_audio)

    p = _writes(sub.add_parser("tag-ending-videos", help="Tag 'Letter X' videos as ending videos"))
    p.set_defaults(func=cmd_tag_ending_videos)

    p = _writes(sub.add_parser("backfill-purpose", help="Copy template_context.asset_purpose to assetPurpose"))
    p.add_argument("--template", required=True)
    p.set_defaults(func=cmd_backfill_purpose)

    p = sub.add_parser("update-playlists", help="Rebuild every child's playlist")
    p.set_defaults(func=cmd_update_playlists)

    p = sub.add_parser("missing-videos", help="Children without recent videos")
    p.add_argument("--template")
    p.add_argument("--days", type=int, default=30)
    p.set_defaults(func=cmd_missing_videos)

    p = sub.add_parser("misassigned-videos", help="Letter videos published as general")
    p.set_defaults(func=cmd_misassigned_videos)

    p = sub.add_parser("approve-video", help="Approve a render and copy it to the public bucket")
    p.add_argument("video_id")
    p.set_defaults(func=cmd_approve_video)

    p = sub.add_parser("job-status", help="Show a render job, or the most recent one")
    p.add_argument("--render-id")
    p.set_defaults(func=cmd_job_status)

    p = sub.add_parser("s3-sync", help="Compare video rows with the public bucket")
    p.set_defaults(func=cmd_s3_sync)

    p = sub.add_parser("storage-stats", help="Video bucket size and cost estimate")
    p.set_defaults(func=cmd_storage_stats)

    p = _writes(sub.add_parser("cleanup-temp-videos", help="Delete old videos under videos/temp/"))
    p.add_argument("--days", type=int, default=7)
    p.set_defaults(func=cmd_cleanup_temp_videos)

    p = sub.add_parser("timeline", help="Print template frame timing")
    p.add_argument("--template", choices=["letter-hunt", "name-video", "lullaby"], default="letter-hunt")
    p.add_argument("--child-name")
    p.add_argument("--seconds", type=float)
    p.add_argument("--check-seconds", type=float)
    p.set_defaults(func=cmd_timeline)

    p = sub.add_parser("generate-prompts", help="Generate image prompts with the text model")
    p.add_argument("--theme", required=True)
    p.add_argument("--age-range", required=True)
    p.add_argument("--template", choices=PROMPT_TEMPLATES, required=True)
    p.add_argument("--safe-zone", action="append", choices=PROMPT_SAFE_ZONES)
    p.add_argument("--child-name")
    p.add_argument("--aspect-ratio", choices=["16:9", "9:16"])
    p.add_argument("--art-style")
    p.add_argument("--count", type=int, default=3)
    p.add_argument("--save", action="store_true", help="Store the prompts as pending rows")
    p.set_defaults(func=cmd_generate_prompts)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or get_settings().log_level)

    try:
        args.func(args)
    except AdminError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
