import itertools

from activitymonitor.config import MessageCatalog
from activitymonitor.pipelines.activity_pipeline import CompanyActivityState
from activitymonitor.reporting.report import Report, build_report, render_report


def _state(**activity):
    state = CompanyActivityState()
    for company, active in activity.items():
        state.merge(company, active)
    return state


def test_all_active_gives_empty_report():
    report = build_report(_state(acme=True, other=True), window=5)

    assert report == Report(window=5, inactive_companies=())
    assert render_report(report, MessageCatalog()) == 'No inactive companies found within 5 days.'


def test_inactive_companies_are_sorted_for_any_insertion_order():
    names = ['zeta', 'Alpha', 'mid', 'beta']
    for order in itertools.permutations(names):
        state = CompanyActivityState()
        for name in order:
            state.merge(name, False)
        assert build_report(state, 5).inactive_companies == ('alpha', 'beta', 'mid', 'zeta')


def test_render_lists_companies_indented_under_header():
    report = Report(window=7, inactive_companies=('acme', 'dr. mcninja'))

    rendered = render_report(report, MessageCatalog())

    assert rendered.splitlines() == [
        'The following companies have been inactive for 7+ days:',
        '    acme',
        '    dr. mcninja',
    ]


def test_render_uses_custom_templates():
    messages = MessageCatalog.from_overrides({'yes_results': 'Stale ({days}d):'})

    rendered = render_report(Report(window=3, inactive_companies=('acme',)), messages)

    assert rendered == 'Stale (3d):\n    acme'
