"""
Command line entry point: fill a page with a profile chain, or list its fields
"""
import argparse
import json
import logging
import sys
import traceback

from autofill.browser import BrowserManager
from autofill.chain import ChainController
from autofill.config import load_config
from autofill.detector import FieldDetector
from autofill.models import Profile
from autofill.orchestrator import FillOrchestrator

logger = logging.getLogger(__name__)


def configure_logging(log_path="autofill.log"):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_path, encoding='utf-8'),
            logging.StreamHandler()
        ]
    )


def load_profiles(profiles_path):
    """Profiles keyed by id, from a JSON list or a {"profiles": [...]} export."""
    with open(profiles_path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("profiles", [])
    profiles = {}
    for entry in data:
        profile = Profile.from_dict(entry)
        if profile.id in profiles:
            logger.warning(f"Duplicate profile id {profile.id}, keeping the first one")
            continue
        profiles[profile.id] = profile
    logger.info(f"Loaded {len(profiles)} profiles from {profiles_path}")
    return profiles


class AutoFillRunner:
    def __init__(self, profiles_path="profiles.json", config_path="config.yaml", headless=None):
        self.config = load_config(config_path)
        if headless is not None:
            self.config.headless = headless
        self.profiles_path = profiles_path
        self.browser = BrowserManager(
            headless=self.config.headless,
            viewport=self.config.viewport,
            timeout_ms=self.config.timeout_ms,
        )

    def run_chain(self, url, profile_id):
        """Open the URL and run the chain starting at profile_id."""
        profiles = load_profiles(self.profiles_path)
        page = self.browser.open_page(url)
        orchestrator = FillOrchestrator(page, self.config)
        controller = ChainController(profiles, orchestrator, self.config)
        return controller.run(profile_id)

    def detect(self, url):
        page = self.browser.open_page(url)
        return FieldDetector(page).detect()

    def shutdown(self):
        """Clean shutdown"""
        self.browser.close()


def build_parser():
    parser = argparse.ArgumentParser(description="Fill web forms from saved profiles")
    parser.add_argument("url")
    parser.add_argument("profile_id", nargs="?")
    parser.add_argument("--profiles", default="profiles.json")
    parser.add_argument("--config", default="config.yaml")
    parser.add_argument("--headless", action="store_true", default=None)
    parser.add_argument("--detect", action="store_true", help="print detected fields and exit")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if not args.detect and not args.profile_id:
        print("profile_id is required unless --detect is given", file=sys.stderr)
        return 2

    runner = AutoFillRunner(args.profiles, args.config, headless=args.headless)
    try:
        if args.detect:
            fields = runner.detect(args.url)
            print(json.dumps([f.to_dict() for f in fields], ensure_ascii=False, indent=2))
            return 0

        outcome = runner.run_chain(args.url, args.profile_id)
        print("=" * 60)
        for profile_id, report in outcome.reports:
            print(f"{profile_id}: {report.summary()}")
            for result in report.results:
                mark = "OK" if result.success else "X"
                suffix = f" ({result.error})" if result.error else ""
                print(f"  [{mark}] {result.field}{suffix}")
        print(f"Chain: {outcome.status.value} - {outcome.message}")
        return 0 if outcome.success else 1
    finally:
        runner.shutdown()


if __name__ == "__main__":
    configure_logging()

    print("=" * 60)
    print("PROFILE AUTOFILL")
    print("=" * 60)

    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n⚠ Process interrupted by user")
        sys.exit(130)
    except Exception as e:
        print(f"\n❌ Critical error: {e}")
        traceback.print_exc()
        sys.exit(1)
