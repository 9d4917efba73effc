import argparse
import asyncio
import json
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

from inbox_insights.app.run import analyze_inbox, connect_client
from inbox_insights.config.settings import load_settings
from inbox_insights.models import EmailSummary, NormalizedEmail
from inbox_insights.parsing.parser import normalize_record
from inbox_insights.pipeline.batch import analyze_batch
from inbox_insights.pipeline.insights import aggregate_insights
from inbox_insights.pipeline.orchestrator import FallbackChain, build_default_chain
from inbox_insights.storage.tokens import JsonFileTokenStore


def load_records(path: Path) -> List[NormalizedEmail]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("emails", [])
    return [normalize_record(record, index=i) for i, record in enumerate(data)]


def print_summary(summary: EmailSummary) -> None:
    email = summary.email
    analysis = summary.analysis
    print("----")
    print(f"Subject:    {email.subject}")
    print(f"From:       {email.sender_name} <{email.sender_email}>")
    print(f"Importance: {summary.importance}  tags={', '.join(summary.tags)}")
    print(f"Summary:    {summary.summary}")
    if analysis is None:
        return
    print(f"Category:   {analysis.category}  urgency={analysis.urgency_level}  sentiment={analysis.sentiment}")
    for item in analysis.action_items:
        print(f"  [todo] {item}")
    if analysis.deadline:
        print(f"  [deadline] {analysis.deadline}")


async def run(args: argparse.Namespace) -> None:
    settings = load_settings()
    chain = FallbackChain([]) if args.rules_only else build_default_chain(settings)

    try:
        if args.from_file:
            summaries = await analyze_batch(load_records(args.from_file), chain)
        else:
            if not args.account:
                raise SystemExit("Pass --account (a signed-in Gmail address) or --from-file.")
            store = JsonFileTokenStore(Path(settings.tokens_path))
            tokens = store.get(args.account)
            if tokens is None:
                raise SystemExit(f"No stored Gmail tokens for {args.account}. Sign in through the web app first.")
            client = connect_client(settings, tokens)
            summaries = await analyze_inbox(
                client,
                chain,
                max_results=args.max_results or settings.max_results,
                account_email=args.account,
            )
    finally:
        await chain.aclose()

    report = aggregate_insights(summaries)
    if args.json:
        print(json.dumps(
            {"emails": [s.to_dict() for s in summaries], "insights": report.to_dict()},
            indent=2,
            ensure_ascii=False,
        ))
        return

    print(f"[run] Active strategies: {', '.join(chain.active_strategies())}")
    print(f"[run] Analyzed {len(summaries)} emails")
    for summary in summaries:
        print_summary(summary)

    print("====")
    for insight, recommendation in zip(report.insights, report.recommendations):
        print(f"[insight] {insight}")
        print(f"          -> {recommendation}")
    print(f"[stats] {json.dumps(report.stats.to_dict())}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Analyze recent inbox emails and print mailbox insights."
    )
    parser.add_argument(
        "--account",
        dest="account",
        default="",
        help="Gmail address whose stored tokens should be used.",
    )
    parser.add_argument(
        "--from-file",
        dest="from_file",
        type=Path,
        default=None,
        help="Analyze a JSON list of {subject, body, senderEmail, senderName} records instead of Gmail.",
    )
    parser.add_argument(
        "--max-results",
        dest="max_results",
        type=int,
        default=0,
        help="How many inbox messages to fetch.",
    )
    parser.add_argument(
        "--rules-only",
        dest="rules_only",
        action="store_true",
        help="Skip external providers and use the keyword rules only.",
    )
    parser.add_argument(
        "--json",
        dest="json",
        action="store_true",
        help="Print machine-readable JSON.",
    )
    asyncio.run(run(parser.parse_args()))


if __name__ == "__main__":
    main()
