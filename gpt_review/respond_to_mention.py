#!/usr/bin/env python3
"""
Respond to @rs-gpt-review mentions in issues, pull requests and comments.

Runs as a GitHub Actions step on `issues`, `pull_request`, `issue_comment`
and `pull_request_review_comment` events. When the triggering body mentions
the assistant, the issue or pull request (with its diff), the earlier
comments and any requested repository files are sent to the model, and the
reply is posted back to the same thread.

Commands in the mentioning comment (see utils/commands.py):
- --help / --prompts: reply with the command or prompt list, no model call
- --model, --prompt, --exclude, --include: adjust this reply

OUTPUTS:
- response_comment: the reply that was posted
- comment_url: link to the posted reply
"""

from typing import Dict, List, Optional

from gpt_review.utils.actions import (
    debug,
    format_summary,
    info,
    set_failed,
    set_output,
    write_summary,
)
from gpt_review.utils.commands import (
    AVAILABLE_COMMANDS,
    VALUE_COMMANDS,
    CommandOptions,
    apply_commands,
    build_help_message,
    build_prompts_list_message,
    has_commands,
    parse_commands,
)
from gpt_review.utils.config import ActionInputs, load_inputs
from gpt_review.utils.diff_sanitizer import (
    DEFAULT_EXCLUDED_FILES,
    DIFF_SECTION_PATTERN,
    remove_occurrences,
)
from gpt_review.utils.escaping import ASSISTANT_NAME, is_bot_authored
from gpt_review.utils.events import (
    EventKind,
    ResolvedEvent,
    classify,
    get_trigger,
    is_mentioned,
    load_event,
    resolve_event,
)
from gpt_review.utils.github_client import (
    get_github_client,
    get_issue,
    get_pull_request_diff,
    get_repo,
    list_comments_before,
    post_comment,
    post_review_reply,
    read_repo_file,
    to_issue_details,
)
from gpt_review.utils.history import count_message_chars, truncate_comments
from gpt_review.utils.llm_client import (
    CompletionRequest,
    LLMResponse,
    generate_completion,
    get_char_budget,
    resolve_model,
)
from gpt_review.utils.models import Comment, IssueDetails, Message, WebhookEvent
from gpt_review.utils.models import messages_to_dicts
from gpt_review.utils.prompts import (
    assemble_prompt,
    comments_block,
    file_content_block,
    format_included_files,
    identity_block,
    issue_block,
    pull_request_block,
    review_comment_block,
)

ASSISTANT_HANDLE = f"@{ASSISTANT_NAME}"


def should_respond(trigger: Optional[dict]) -> bool:
    """Respond only to human bodies that mention the assistant."""
    body = (trigger or {}).get("body")
    if not body or not is_mentioned(body, ASSISTANT_HANDLE):
        return False
    return not is_bot_authored(body)


def process_commands(body: str, issue) -> Optional[CommandOptions]:
    """
    Parse the commands in the triggering body.

    Answers --help and --prompts directly and returns None in that case.
    """
    if not has_commands(body):
        return CommandOptions(body=body)

    commands = parse_commands(body, AVAILABLE_COMMANDS)
    debug("Commands", {"commands": [c.model_dump(mode="json") for c in commands]})
    options = apply_commands(commands, body)

    if options.show_help:
        post_comment(issue, build_help_message())
        info("Posted command list")
        return None
    if options.show_prompts:
        post_comment(issue, build_prompts_list_message())
        info("Posted prompt list")
        return None

    return options


def load_included_files(repo, paths: List[str]) -> Dict[str, str]:
    """Read the files requested with --include."""
    return {path: read_repo_file(repo, path) for path in paths}


def build_prompt(
    resolved: ResolvedEvent,
    repo,
    repo_name: str,
    details: IssueDetails,
    issue,
    body: str,
    excluded_files: List[str],
    included_files: Dict[str, str],
    max_chars: int,
) -> List[Message]:
    """Fetch the thread context and assemble the prompt."""
    identity = identity_block(ASSISTANT_NAME, ASSISTANT_HANDLE)

    if details.is_pull_request:
        diff = get_pull_request_diff(repo, details.number)
        debug("Diff before", {"before": len(diff)})
        # Strip lockfiles and build output to save prompt characters
        diff = remove_occurrences(diff, DIFF_SECTION_PATTERN, excluded_files)
        debug("Diff after", {"after": len(diff)})
        subject = pull_request_block(repo_name, details, diff, max_chars)
    else:
        subject = issue_block(repo_name, details, max_chars)

    comments: List[Message] = []
    if resolved.kind in (EventKind.ISSUE_COMMENT, EventKind.PULL_REQUEST_COMMENT):
        trigger_comment = Comment.from_payload(resolved.trigger, body=body)
        history = list_comments_before(issue, trigger_comment.id)
        # The reply counts against the budget too, so history gets at most half
        history = truncate_comments(
            history, count_message_chars(identity + subject), max_chars // 2
        )
        info(f"Including {len(history)} earlier comment(s)")
        comments = comments_block([*history, trigger_comment])

    review_comment: List[Message] = []
    if resolved.kind == EventKind.PULL_REQUEST_REVIEW_COMMENT:
        review_comment = review_comment_block(resolved.trigger.get("diff_hunk") or "", body)

    file_content: List[Message] = []
    if included_files:
        file_content = file_content_block(format_included_files(included_files))

    return assemble_prompt(
        identity,
        subject,
        comments,
        review_comment,
        file_content,
        known_commands=AVAILABLE_COMMANDS,
        valued_commands=VALUE_COMMANDS,
    )


def post_reply(resolved: ResolvedEvent, repo, issue, content: str):
    """Post the reply where the mention was made."""
    if resolved.kind == EventKind.PULL_REQUEST_REVIEW_COMMENT:
        return post_review_reply(repo, resolved.issue_number, content, resolved.trigger["id"])
    return post_comment(issue, content)


def run(
    event: Optional[WebhookEvent] = None, inputs: Optional[ActionInputs] = None
) -> Optional[LLMResponse]:
    """
    Handle one event. Returns the model response, or None if nothing was asked.

    Raises:
        GPTReviewError: For unresolvable events, bad commands or incomplete replies
    """
    event = event or load_event()
    debug("Context", {"event": event.name, "payload": event.payload})

    trigger = get_trigger(event)
    debug("Trigger", {"kind": classify(event).value, "trigger": trigger})
    if not should_respond(trigger):
        info(f"Event doesn't contain {ASSISTANT_HANDLE}. Skipping...")
        return None

    resolved = resolve_event(event)
    inputs = inputs or load_inputs()
    excluded_files = [*DEFAULT_EXCLUDED_FILES, *inputs.files_excluded]

    gh = get_github_client(inputs.github_token)
    repo = get_repo(gh)
    issue = get_issue(repo, resolved.issue_number)

    options = process_commands(resolved.trigger["body"], issue)
    if options is None:
        return None
    excluded_files.extend(options.exclude_files)
    included_files = load_included_files(repo, options.include_files)

    details = to_issue_details(issue)
    debug("Issue", details.model_dump())

    model = resolve_model(options.model_override, inputs.model)
    max_chars = get_char_budget(model)
    info(f"Using model {model} ({max_chars:,} character budget)")

    prompt = build_prompt(
        resolved,
        repo,
        repo.full_name,
        details,
        issue,
        options.body,
        excluded_files,
        included_files,
        max_chars,
    )
    debug("Prompt", {"prompt": messages_to_dicts(prompt)})

    response = generate_completion(
        inputs.openai_key,
        CompletionRequest(
            model=model,
            messages=prompt,
            temperature=inputs.openai_temperature,
            top_p=inputs.openai_top_p,
            max_tokens=inputs.openai_max_tokens,
        ),
    )
    if response.usage:
        info(f"LLM call complete: {response.usage.format_compact()}")

    # Nothing is posted to the thread before the completion succeeds
    if options.selected_prompt:
        post_comment(issue, f"{ASSISTANT_HANDLE} {options.selected_prompt}")
        info(f"Used canned prompt: {options.selected_prompt}")

    posted = post_reply(resolved, repo, issue, response.content)
    info(f"Posted reply: {posted.html_url}")

    set_output("response_comment", response.content)
    set_output("comment_url", posted.html_url or "")
    write_summary(
        format_summary(
            issue_url=details.html_url,
            request_body=resolved.trigger.get("body") or "",
            request_url=resolved.trigger.get("html_url"),
            response_body=posted.body or "",
            response_url=posted.html_url,
            payload=event.payload,
            prompt=messages_to_dicts(prompt),
            usage_line=response.usage.format_summary() if response.usage else None,
        )
    )
    return response


def main():
    try:
        run()
    except Exception as e:
        set_failed(f"{type(e).__name__}: {e}")


if __name__ == "__main__":
    main()
