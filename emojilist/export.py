"""
Export the emoji catalogue to JSON.

Writes two files into the output directory (default: current directory):
* emoji-grouped.json - the full group/subgroup/emoji tree
* emoji-list.json    - a flat array of all known emoji
"""
from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from emojilist.core.config import ServiceSettings
from emojilist.services.emoji_service import EmojiService

logger = logging.getLogger(__name__)

GROUPED_FILE_NAME = "emoji-grouped.json"
LIST_FILE_NAME = "emoji-list.json"


def _print_error_chain(error: BaseException) -> None:
    current: Optional[BaseException] = error
    while current is not None:
        print(f"[{current.__class__.__name__}] {current}", file=sys.stderr)
        current = current.__cause__


def export_json(service: EmojiService, output_dir: Path) -> None:
    """Write the grouped tree and the flat emoji list of an initialized service."""
    output_dir.mkdir(parents=True, exist_ok=True)

    groups = [g.model_dump(mode="json", by_alias=True) for g in service.get_all_groups()]
    (output_dir / GROUPED_FILE_NAME).write_text(
        json.dumps(groups, ensure_ascii=False), encoding="utf-8"
    )
    (output_dir / LIST_FILE_NAME).write_text(
        json.dumps(service.get_all_emoji(), ensure_ascii=False), encoding="utf-8"
    )


async def run_export(output_dir: Path, settings: Optional[ServiceSettings] = None) -> int:
    service = EmojiService(settings or ServiceSettings.from_env())

    print("Building cache...", end="", file=sys.stderr, flush=True)
    try:
        await service.auto_initialize()
    except Exception as e:
        print(" [FAIL]", file=sys.stderr)
        print("There was an error initializing the emoji cache", file=sys.stderr)
        _print_error_chain(e)
        return 1
    print(" [DONE]", file=sys.stderr)

    export_json(service, output_dir)
    print("Emoji data exported")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args = list(sys.argv[1:] if argv is None else argv)

    settings = ServiceSettings.from_env()
    if "--portable" in args:
        args.remove("--portable")
        settings = settings.model_copy(update={"portable": True})

    output_dir = Path(args[0]) if args else Path.cwd()
    return asyncio.run(run_export(output_dir, settings))


if __name__ == "__main__":
    sys.exit(main())
