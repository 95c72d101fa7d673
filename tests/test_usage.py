"""
Token usage accounting: missing figures stay missing.
"""

from itertools import permutations

from agentloop.domain.usage import TokenUsage


def test_none_plus_none_stays_none():
    total = TokenUsage() + TokenUsage()

    assert total.input_tokens is None
    assert total.is_empty()


def test_none_plus_value_keeps_value():
    total = TokenUsage(input_tokens=None, output_tokens=3) + TokenUsage(input_tokens=5, output_tokens=None)

    assert total.input_tokens == 5
    assert total.output_tokens == 3
    assert total.total_tokens is None


def test_zero_is_not_none():
    total = TokenUsage(cached_tokens=0) + TokenUsage()

    assert total.cached_tokens == 0


def test_merge_mutates_in_place():
    usage = TokenUsage(input_tokens=1)

    usage.merge(TokenUsage(input_tokens=2, reasoning_tokens=7))

    assert usage.input_tokens == 3
    assert usage.reasoning_tokens == 7


def test_merge_order_does_not_matter():
    reports = [
        TokenUsage(input_tokens=10, output_tokens=None, total_tokens=10),
        TokenUsage(input_tokens=None, output_tokens=4, total_tokens=4, cached_tokens=2),
        TokenUsage(input_tokens=1, output_tokens=1, reasoning_tokens=3),
    ]

    totals = set()
    for order in permutations(reports):
        total = TokenUsage()
        for report in order:
            total.merge(report)
        totals.add(total.model_dump_json())

    assert len(totals) == 1
    assert TokenUsage.model_validate_json(totals.pop()) == TokenUsage(
        input_tokens=11, output_tokens=5, total_tokens=14, cached_tokens=2, reasoning_tokens=3
    )


def test_combine_handles_missing_reports():
    report = TokenUsage(total_tokens=9)

    assert TokenUsage.combine(None, None) is None
    assert TokenUsage.combine(None, report) == report
    assert TokenUsage.combine(report, None) == report
    assert TokenUsage.combine(report, report).total_tokens == 18


def test_add_does_not_mutate_operands():
    a = TokenUsage(input_tokens=1)
    b = TokenUsage(input_tokens=2)

    _ = a + b

    assert a.input_tokens == 1
    assert b.input_tokens == 2
