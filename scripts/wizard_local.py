from __future__ import annotations

#!/usr/bin/env python3
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

"""
Interactive local wizard harness (no HTTP, no browser).

Usage:
  python3 scripts/wizard_local.py

What it does:
- Builds the wizard through the same wiring the API uses (settings from .env)
- Keeps a stable client id so the draft survives restarts
- Lets you edit fields, navigate, attach local files and submit
"""

import asyncio
import mimetypes
import os
import shlex

from contact_wizard.domain.entities.attachment import CandidateFile
from contact_wizard.wiring.dependencies import build_wizard


def _print_header(client_id: str) -> None:
    print("\nLocal Inquiry Wizard")
    print("-" * 60)
    print(f"client_id: {client_id}")
    print("Commands: /set <field> <value>, /next, /back, /attach <path>...,")
    print("          /remove <index>, /estimate <m2> <quality>, /submit, /reset, /show, /quit")
    print("-" * 60)


def _print_state(wizard) -> None:
    form = wizard.form
    print(f"\n--- Step {int(wizard.current_step)}: {wizard.sequencer.current_label} ({wizard.sequencer.progress:.0f}%) ---")
    for key, value in form.scalar_fields().items():
        if key == "submission_token":
            continue
        marker = " <-" if key == wizard.focus_field else ""
        print(f"{key}: {value!r}{marker}")
    for i, attachment in enumerate(form.attachments):
        print(f"attachment[{i}]: {attachment.name} ({attachment.byte_size} bytes)")
    for key, message in wizard.errors.items():
        print(f"error[{key}]: {message}")
    print(f"available now: {wizard.is_available}")
    print(f"actions: {', '.join(wizard.available_actions) or '(none)'}")


def _print_notification(wizard) -> None:
    notification = wizard.notifications.current
    if notification is not None:
        print(f"({notification.severity.value}) {notification.message}")
        wizard.notifications.dismiss()


def _load_candidate(path: str) -> CandidateFile:
    file_path = Path(path).expanduser()
    content_type, _ = mimetypes.guess_type(file_path.name)
    return CandidateFile(name=file_path.name, content_type=content_type, content=file_path.read_bytes())


async def main() -> None:
    client_id = os.getenv("WIZARD_CLIENT_ID", "local_user_1")
    wizard = build_wizard(client_id=client_id)
    wizard.mount()
    _print_header(client_id)
    _print_notification(wizard)

    try:
        while True:
            try:
                line = (await asyncio.to_thread(input, "\n> ")).strip()
            except (EOFError, KeyboardInterrupt):
                print("\nBye!")
                return

            if not line:
                continue
            try:
                parts = shlex.split(line)
            except ValueError as e:
                print(f"ERROR: {e}")
                continue
            cmd, args = parts[0].lower(), parts[1:]

            if cmd in ("/quit", "/exit"):
                print("Bye!")
                return
            if cmd == "/show":
                _print_state(wizard)
                continue

            if cmd == "/set" and len(args) >= 2:
                name, value = args[0], " ".join(args[1:])
                if name == "privacy_accepted":
                    value = value.lower() in ("1", "true", "yes", "y")
                try:
                    if not wizard.set_field(name, value):
                        print("(form is locked)")
                except ValueError as e:
                    print(f"ERROR: {e}")
            elif cmd == "/next":
                wizard.next()
            elif cmd == "/back":
                wizard.back()
            elif cmd == "/attach" and args:
                try:
                    candidates = [_load_candidate(path) for path in args]
                except OSError as e:
                    print(f"ERROR: {e}")
                    continue
                if wizard.add_files(candidates) is None:
                    print("(attachments are added on the last step)")
            elif cmd == "/remove" and len(args) == 1 and args[0].isdigit():
                wizard.remove_attachment(int(args[0]))
            elif cmd == "/estimate" and len(args) == 2 and args[0].isdigit():
                try:
                    wizard.append_estimate(int(args[0]), args[1])
                except ValueError as e:
                    print(f"ERROR: {e}")
            elif cmd == "/submit":
                outcome = await wizard.submit()
                if outcome is None:
                    print("(submit is available on the last step)")
                elif outcome.success and wizard.summary is not None:
                    print("\n--- Sent ---")
                    print(f"{wizard.summary.name} <{wizard.summary.email}> via {wizard.summary.preferred_contact}")
                    print(f"files: {', '.join(wizard.summary.attachment_names) or '(none)'}")
            elif cmd == "/reset":
                wizard.reset()
            else:
                print("Unknown command. Type /show or /quit.")
                continue

            _print_notification(wizard)
            _print_state(wizard)
    finally:
        wizard.unmount()


if __name__ == "__main__":
    asyncio.run(main())
