"""Per-owner expiry notices."""

from __future__ import annotations

import html
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...domain.value_objects import RotationUrgency
from ..exceptions import DispatchError

if TYPE_CHECKING:
    from uuid import UUID

    from ...domain.entities import ExpiryCandidate, ExpiryReport
    from ...domain.value_objects import FreshnessPolicy
    from ..ports import NotificationTransport

logger = logging.getLogger(__name__)

SUBJECT = "Password Expiration Notice"


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Outcome of the single delivery attempt made for one owner."""

    owner_id: UUID
    address: str | None
    candidates: tuple[ExpiryCandidate, ...]
    delivered: bool
    error: str | None = None

    @property
    def candidate_count(self) -> int:
        """Number of credentials listed in the message."""
        return len(self.candidates)


class NotificationDispatcher:
    """
    Sends one message per owner listing all of that owner's candidates.

    A failure for one owner is logged and recorded in that owner's result; it
    never stops delivery to the remaining owners.
    """

    def __init__(
        self,
        transport: NotificationTransport,
        policy: FreshnessPolicy,
        *,
        include_html: bool = False,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            transport: Adapter delivering composed messages.
            policy: Freshness policy quoted in message bodies.
            include_html: Also attach an HTML alternative body.
        """
        self._transport = transport
        self._policy = policy
        self._include_html = include_html

    async def dispatch(
        self, owner_email: str, candidates: list[ExpiryCandidate]
    ) -> DispatchResult:
        """Compose and deliver one owner's notice."""
        if not candidates:
            msg = "dispatch requires at least one candidate"
            raise ValueError(msg)

        owner_id = candidates[0].owner_id
        body = self.compose_text(candidates)
        html_body = self.compose_html(candidates) if self._include_html else None

        try:
            await self._transport.send(owner_email, SUBJECT, body, html_body=html_body)
        except DispatchError as e:
            logger.warning("Notice to owner %s failed: %s", owner_id, e)
            return DispatchResult(owner_id, owner_email, tuple(candidates), False, str(e))
        except Exception as e:
            logger.exception("Unexpected error sending notice to owner %s", owner_id)
            error = f"{type(e).__name__}: {e}"
            return DispatchResult(owner_id, owner_email, tuple(candidates), False, error)

        logger.info("Notice for %d passwords sent to owner %s", len(candidates), owner_id)
        return DispatchResult(owner_id, owner_email, tuple(candidates), True)

    async def dispatch_all(
        self, report: ExpiryReport, addresses: Mapping[UUID, str]
    ) -> list[DispatchResult]:
        """Notify every owner in the report, one attempt each."""
        results: list[DispatchResult] = []

        for owner_id, candidates in report.by_owner.items():
            address = addresses.get(owner_id)
            if not address:
                logger.warning("No contact address for owner %s, skipping", owner_id)
                results.append(
                    DispatchResult(owner_id, None, tuple(candidates), False, "no contact address")
                )
                continue
            results.append(await self.dispatch(address, candidates))

        return results

    def compose_text(self, candidates: list[ExpiryCandidate]) -> str:
        """Plain text body."""
        lines = [
            "Hello,",
            "",
            "Some of your passwords are approaching their expiration date "
            f"({self._policy.threshold_days} days from last update):",
            "",
        ]
        lines.extend(
            f"- {c.title}: last updated {c.last_modified_at:%Y-%m-%d} "
            f"({c.age_days} days ago), {self._describe_remaining(c)}"
            for c in candidates
        )
        lines.extend([
            "",
            "How to update your password:",
            "1. Log into your Password Manager",
            "2. Find the password(s) listed above",
            '3. Click the "Edit" button to update them',
            "",
            "Best regards,",
            "Your Password Manager",
        ])
        return "\n".join(lines)

    def compose_html(self, candidates: list[ExpiryCandidate]) -> str:
        """HTML alternative body."""
        urgency = RotationUrgency.most_pressing(
            self._policy.urgency(c.age_days) for c in candidates
        )
        rows = ""
        for c in candidates:
            rows += f"<tr><td>{html.escape(c.title)}</td>"
            rows += f"<td>{c.last_modified_at:%Y-%m-%d}</td><td>{c.age_days}</td>"
            rows += f"<td>{html.escape(self._describe_remaining(c))}</td></tr>\n"

        return f"""<!DOCTYPE html>
<html>
<head>
<style>
body {{ font-family: Arial, sans-serif; margin: 20px; }}
.header {{ background-color: {urgency.color_hex}; padding: 15px; border-radius: 5px; }}
table {{ border-collapse: collapse; width: 100%; margin: 15px 0; }}
th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
tr:nth-child(even) {{ background-color: #f2f2f2; }}
.footer {{ margin-top: 20px; font-size: 12px; color: #6c757d; }}
</style>
</head>
<body>
<div class="header"><h1>{SUBJECT}</h1><p>{urgency.label}</p></div>
<p>Some of your passwords are approaching their expiration date
({self._policy.threshold_days} days from last update).</p>
<table>
<tr><th>Password</th><th>Last updated</th><th>Age (days)</th><th>Status</th></tr>
{rows}
</table>
<p>Please update these passwords soon to maintain security.</p>
<div class="footer"><p>Your Password Manager</p></div>
</body>
</html>"""

    @staticmethod
    def _describe_remaining(candidate: ExpiryCandidate) -> str:
        days = candidate.days_until_expiry
        if days <= 0:
            return "expires today"
        return f"expires in {days} day{'s' if days != 1 else ''}"
