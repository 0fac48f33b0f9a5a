#!/usr/bin/env python3
"""Conversation intelligence CLI."""

import argparse
import json
import logging
import sys
import uuid

from config.settings import Settings
from memory.context_optimizer import ContextOptimizer
from agents.role_detector import RoleDetector
from schemas.conversation import ConversationMessage
from schemas.intelligence import RoleSignal
from orchestrator import ConversationOrchestrator


def load_conversation(path: str) -> list[ConversationMessage]:
    """Load a JSON list of {"role", "content"} objects."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return [ConversationMessage.model_validate(item) for item in data]


def read_system_prompt(args) -> str:
    if args.system_prompt_file:
        with open(args.system_prompt_file, encoding="utf-8") as f:
            return f.read()
    return args.system_prompt


def cmd_optimize(args) -> int:
    messages = load_conversation(args.file)
    optimizer = ContextOptimizer()
    result = optimizer.optimize(
        messages,
        read_system_prompt(args),
        args.session_id,
        max_history_tokens=args.max_history_tokens
    )
    print(result.model_dump_json(indent=2))
    return 0


def cmd_detect_role(args) -> int:
    signal = RoleSignal(
        person_role_text=args.title,
        person_seniority=args.seniority,
        company_summary=args.company_summary,
        company_industry=args.industry,
    )
    print(RoleDetector().detect_role(signal).model_dump_json(indent=2))
    return 0


def cmd_chat(args) -> int:
    settings = Settings(
        llm_provider=args.provider,
        llm_model=args.model,
        memory_enabled=not args.no_memory,
        verbose=args.verbose,
    )
    orchestrator = ConversationOrchestrator(settings=settings)
    history = load_conversation(args.history) if args.history else None

    result = orchestrator.handle_message(
        session_id=args.session_id or str(uuid.uuid4()),
        text=args.message,
        system_prompt=read_system_prompt(args),
        history=history,
        stage=args.stage
    )

    print("\n" + "="*60)
    print("REPLY")
    print("="*60 + "\n")
    print(result.reply if result.reply is not None else "(no model configured)")
    print(f"\nIntent: {result.intent.type.value} ({result.intent.confidence})")
    print(f"Context: ~{result.context.estimated_tokens} tokens, cache used: {result.context.used_cache}")
    if result.cost:
        print(f"Cost: ${result.cost.total_cost:.6f}")
    print("Suggestions: " + ", ".join(s.label for s in result.suggestions))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Conversation context optimization and lead intelligence"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    optimize = subparsers.add_parser("optimize", help="Optimize a conversation for a model call")
    optimize.add_argument("--file", "-f", required=True, help="Conversation JSON file")
    optimize.add_argument("--system-prompt", default="You are a helpful assistant.")
    optimize.add_argument("--system-prompt-file", help="Read the system prompt from a file")
    optimize.add_argument("--session-id", default="cli")
    optimize.add_argument(
        "--max-history-tokens",
        type=int,
        default=ContextOptimizer.DEFAULT_MAX_HISTORY_TOKENS,
        help="History token budget (default: 4000)"
    )
    optimize.set_defaults(func=cmd_optimize)

    detect = subparsers.add_parser("detect-role", help="Detect a professional role from research signals")
    detect.add_argument("--title", help="Stated job title")
    detect.add_argument("--seniority", help="Seniority text")
    detect.add_argument("--company-summary", help="Company summary text")
    detect.add_argument("--industry", help="Company industry")
    detect.set_defaults(func=cmd_detect_role)

    chat = subparsers.add_parser("chat", help="Run one chat turn against the configured model")
    chat.add_argument("--message", "-m", required=True, help="Visitor message")
    chat.add_argument("--history", help="Prior conversation JSON file")
    chat.add_argument("--session-id", help="Session ID (random if omitted)")
    chat.add_argument("--system-prompt", default="You are a helpful assistant.")
    chat.add_argument("--system-prompt-file", help="Read the system prompt from a file")
    chat.add_argument("--stage", help="Conversation stage (e.g. summary)")
    chat.add_argument(
        "--provider",
        choices=["gemini", "openai", "anthropic"],
        default="gemini",
        help="LLM provider (default: gemini)"
    )
    chat.add_argument("--model", help="Model override")
    chat.add_argument("--no-memory", action="store_true", help="Do not persist the session")
    chat.set_defaults(func=cmd_chat)

    return parser


def main():
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        sys.exit(args.func(args))
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
