"""DNS record check.

Queries one record type for one name against one server and compares the
answer set with the configured expectation.
"""

from __future__ import annotations

import logging
from typing import ClassVar

import dns.asyncresolver
import dns.exception
import dns.rdata
import dns.rdatatype
import dns.resolver

from auditrun.checks.base import Check
from auditrun.core.errors import ExecutionFailure
from auditrun.core.options import require_list_of_strings, require_string

logger = logging.getLogger(__name__)

C_DNS_SERVER = "dns_server"
C_DNS_QUESTION = "dns_question"
C_DNS_QUESTION_TYPE = "dns_question_type"
C_EXPECTED_ANSWER = "expected_answer"

SUPPORTED_RECORD_TYPES: dict[str, dns.rdatatype.RdataType] = {
    "A": dns.rdatatype.A,
    "AAAA": dns.rdatatype.AAAA,
    "MX": dns.rdatatype.MX,
    "CNAME": dns.rdatatype.CNAME,
    "TXT": dns.rdatatype.TXT,
}


def strip_txt_record(txt: str) -> str:
    """Remove one pair of wrapping double quotes, if present."""
    if len(txt) >= 2 and txt.startswith('"') and txt.endswith('"'):
        return txt[1:-1]
    return txt


def render_record(rdata: dns.rdata.Rdata) -> str:
    """Render an answer record to the form used in expectations.

    Raises:
        ExecutionFailure: For record types the check does not support.
    """
    if rdata.rdtype in (dns.rdatatype.A, dns.rdatatype.AAAA):
        return rdata.address
    if rdata.rdtype == dns.rdatatype.MX:
        return rdata.exchange.to_text(omit_final_dot=True)
    if rdata.rdtype == dns.rdatatype.CNAME:
        return rdata.target.to_text(omit_final_dot=True)
    if rdata.rdtype == dns.rdatatype.TXT:
        return strip_txt_record(rdata.to_text())
    raise ExecutionFailure(f"Unsupported DNS record type [{dns.rdatatype.to_text(rdata.rdtype)}].")


def _join(values: list[str]) -> str:
    return ", ".join(values)


class DNSCheck(Check):
    """Compare the records of a DNS name with the expected answers."""

    check_type: ClassVar[str] = "dns"
    required_options: ClassVar[tuple[str, ...]] = (C_DNS_SERVER, C_DNS_QUESTION, C_DNS_QUESTION_TYPE)

    async def _check(self) -> None:
        server = require_string(self.options, C_DNS_SERVER)
        question = require_string(self.options, C_DNS_QUESTION)
        question_type = require_string(self.options, C_DNS_QUESTION_TYPE).upper()
        # Expectations form a set; keep the configured order for messages
        expected = list(dict.fromkeys(require_list_of_strings(self.options, C_EXPECTED_ANSWER)))

        rdtype = SUPPORTED_RECORD_TYPES.get(question_type)
        if rdtype is None:
            raise ExecutionFailure(f"Unsupported DNS question type [{question_type}].")

        try:
            answer = await self._lookup(server, question, rdtype)
        except dns.resolver.NXDOMAIN:
            self.add_issue("Domain [{}] not found at all.", question)
            return
        except dns.resolver.NoAnswer:
            if not expected:
                logger.debug(f"Empty result for lookup [{self.full_identifier}] and empty result expected")
                return
            self.add_issue("Expected records for [{}] but did not find any.", question)
            return
        except dns.exception.DNSException as e:
            raise ExecutionFailure(f"DNS lookup of [{question}] against [{server}] failed: {e}") from e

        # Duplicate answers collapse before comparison
        records = list(dict.fromkeys(render_record(rdata) for rdata in answer))
        logger.debug(f"Lookup [{self.full_identifier}] returned {records}")

        if not expected and records:
            self.add_issue(
                "Expected no DNS records but found <{}>. The records are: [{}]",
                len(records),
                _join(records),
            )
            return

        if len(records) != len(expected):
            self.add_issue(
                "Expected <{}> DNS records but found <{}>. The records are: [{}], but I expected [{}].",
                len(expected),
                len(records),
                _join(records),
                _join(expected),
            )
            return

        found = set(records)
        if any(record not in found for record in expected):
            self.add_issue("Expected records [{}] but found [{}].", _join(expected), _join(records))

    async def _lookup(
        self,
        server: str,
        question: str,
        rdtype: dns.rdatatype.RdataType,
    ) -> list[dns.rdata.Rdata]:
        """Run a single query against ``server``.

        Resolver outcomes (NXDOMAIN, NoAnswer, timeouts) propagate as
        dnspython exceptions.
        """
        try:
            resolver = await dns.asyncresolver.make_resolver_at(server)
        except dns.exception.DNSException as e:
            raise ExecutionFailure(f"Could not resolve DNS server [{server}]: {e}") from e

        answer = await resolver.resolve(question, rdtype)
        return list(answer)
