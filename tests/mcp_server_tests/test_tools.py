"""Tests for the MCP server tools module."""

import os
import sys
import shutil
import tempfile
import pytest

# Add src and mcp-server to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../mcp-server')))

from tools import ScheduleTools, MultiProfileTools


# Path to test fixtures
FIXTURES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'fixtures'))

# Path to the project root (for reference files)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '../..'))


@pytest.fixture(scope="module")
def test_base_path():
    """Create a temporary directory structure for testing.

    This creates a temp directory with the required structure:
    - input-parameters/testprofile/profile.json (from fixtures)
    - reference/tax-tables.json (symlinked from project)
    """
    temp_dir = tempfile.mkdtemp()

    input_params_dir = os.path.join(temp_dir, 'input-parameters')
    os.makedirs(input_params_dir)
    shutil.copytree(
        os.path.join(FIXTURES_PATH, 'testprofile'),
        os.path.join(input_params_dir, 'testprofile')
    )

    os.symlink(
        os.path.join(PROJECT_ROOT, 'reference'),
        os.path.join(temp_dir, 'reference')
    )

    yield temp_dir

    shutil.rmtree(temp_dir, ignore_errors=True)


class TestScheduleTools:
    """Tests for ScheduleTools class."""

    @pytest.fixture
    def tools(self, test_base_path):
        """Create a ScheduleTools instance using testprofile."""
        return ScheduleTools(test_base_path, 'testprofile')

    def test_init_loads_profile_and_table(self, tools):
        """Test that initialization loads the profile and its tax table."""
        assert tools.profile.name == 'testprofile'
        assert len(tools.profile.recurring_events) == 3
        assert tools.table.jurisdiction == 'SK'
        assert tools.table.year == 2025

    def test_get_profile_overview(self, tools):
        overview = tools.get_profile_overview()
        assert overview['hourly_rate'] == 30.0
        assert overview['overtime_multiplier'] == 2.0
        assert overview['jurisdiction'] == 'Saskatchewan'
        assert overview['shift_count'] == 4
        assert [e['id'] for e in overview['recurring_events']] == ['payday', 'paycard', 'range']

    def test_get_next_occurrence_all_events(self, tools):
        result = tools.get_next_occurrence(reference_date='2025-06-01')
        assert result['reference_date'] == '2025-06-01'
        next_dates = {e['id']: e['next_date'] for e in result['events']}
        assert next_dates == {'payday': '2025-06-06', 'paycard': '2025-06-13', 'range': '2025-06-03'}

    def test_get_next_occurrence_single_event(self, tools):
        result = tools.get_next_occurrence('payday', '2025-06-07')
        assert len(result['events']) == 1
        assert result['events'][0]['next_date'] == '2025-06-20'
        assert result['events'][0]['description'] == "Payday on Jun 20, 2025 - $3,100.00"

    def test_get_next_occurrence_unknown_event(self, tools):
        with pytest.raises(ValueError):
            tools.get_next_occurrence('missing', '2025-06-01')

    def test_get_occurrences_in_range(self, tools):
        result = tools.get_occurrences_in_range('2025-06-01', '2025-07-01')
        assert result['occurrences'] == {
            'payday': ['2025-06-06', '2025-06-20'],
            'paycard': ['2025-06-13', '2025-06-27'],
            'range': ['2025-06-03'],
        }

    def test_get_occurrences_in_range_max_count(self, tools):
        result = tools.get_occurrences_in_range('2025-06-01', '2026-06-01', 'payday', max_count=2)
        assert result['occurrences'] == {'payday': ['2025-06-06', '2025-06-20']}

    def test_get_occurrences_invalid_date(self, tools):
        with pytest.raises(ValueError):
            tools.get_occurrences_in_range('June 1', '2025-07-01')

    def test_get_upcoming_reminders(self, tools):
        result = tools.get_upcoming_reminders('2025-06-02')
        titles = [r['title'] for r in result['reminders']]
        assert titles == ['Upcoming Shifts', 'Reminder: Range Qualification']
        assert result['reminders'][1]['body'] == 'Range Qualification is tomorrow'
        assert result['reminders'][1]['due_date'] == '2025-06-03'

    def test_get_month_summary(self, tools):
        summary = tools.get_month_summary(2025, 6)
        assert summary['total_shifts'] == 4
        assert summary['counts_by_type']['sick'] == 1
        assert summary['regular_hours'] == 24.0
        assert summary['overtime_hours'] == 12.0
        assert summary['pay'] == {'regular_pay': 720.0, 'overtime_pay': 720.0, 'total_pay': 1440.0}
        assert summary['annualized_income'] == 17280.0

    def test_get_tax_breakdown_with_income(self, tools):
        result = tools.get_tax_breakdown(60000)
        assert result['federal_tax'] == 9365.26
        assert result['jurisdiction'] == 'Saskatchewan'
        assert result['tax_year'] == 2025

    def test_get_tax_breakdown_annualized_month(self, tools):
        result = tools.get_tax_breakdown(year=2025, month=6)
        assert result['gross_income'] == 17280.0
        assert result['federal_tax'] == 2592.0
        assert result['provincial_tax'] == 1814.4
        assert result['pension_contribution'] == 819.91
        assert result['insurance_contribution'] == 273.02

    def test_get_tax_breakdown_requires_input(self, tools):
        result = tools.get_tax_breakdown()
        assert 'error' in result

    def test_get_overtime_pay_profile_defaults(self, tools):
        result = tools.get_overtime_pay(40, 8)
        assert result['multiplier'] == 2.0
        assert result['regular_pay'] == 1200.0
        assert result['overtime_pay'] == 480.0
        assert result['total_pay'] == 1680.0

    def test_get_overtime_pay_overrides(self, tools):
        result = tools.get_overtime_pay(40, 8, hourly_rate=25, multiplier=1.5)
        assert result['total_pay'] == 1300.0

    def test_get_overtime_pay_rejects_multiplier(self, tools):
        with pytest.raises(ValueError):
            tools.get_overtime_pay(40, 8, multiplier=1.75)


class TestMultiProfileTools:
    """Tests for MultiProfileTools class."""

    @pytest.fixture
    def multi_tools(self, test_base_path):
        return MultiProfileTools(test_base_path)

    def test_init_discovers_profiles(self, multi_tools):
        assert 'testprofile' in multi_tools.profiles

    def test_init_sets_default_profile(self, multi_tools):
        assert multi_tools.default_profile == 'testprofile'

    def test_init_with_explicit_default(self, test_base_path):
        tools = MultiProfileTools(test_base_path, default_profile='testprofile')
        assert tools.default_profile == 'testprofile'

    def test_list_profiles(self, multi_tools):
        result = multi_tools.list_profiles()
        assert result['available_profiles'] == ['testprofile']
        assert result['default_profile'] == 'testprofile'
        assert result['profiles_info']['testprofile']['hourly_rate'] == 30.0
        assert result['failed_profiles'] == {}

    def test_results_tagged_with_profile(self, multi_tools):
        result = multi_tools.get_month_summary(2025, 6, 'testprofile')
        assert result['profile'] == 'testprofile'
        result = multi_tools.get_next_occurrence(reference_date='2025-06-01')
        assert result['profile'] == 'testprofile'

    def test_invalid_profile(self, multi_tools):
        with pytest.raises(ValueError) as exc:
            multi_tools.get_upcoming_reminders('2025-06-01', 'nonexistent')
        assert 'not found' in str(exc.value)

    def test_wrappers_forward_arguments(self, multi_tools):
        assert multi_tools.get_tax_breakdown(60000)['federal_tax'] == 9365.26
        assert multi_tools.get_overtime_pay(40, 8)['total_pay'] == 1680.0
        occurrences = multi_tools.get_occurrences_in_range('2025-06-01', '2025-07-01', 'range')
        assert occurrences['occurrences'] == {'range': ['2025-06-03']}

    def test_reload_profiles(self, multi_tools):
        initial_profiles = set(multi_tools.profiles.keys())
        result = multi_tools.reload_profiles()

        assert result['status'] == 'success'
        assert 'profiles_loaded' in result
        assert 'default_profile' in result
        assert set(result['changes']['reloaded']) == initial_profiles
        assert result['changes']['added'] == []
        assert result['changes']['removed'] == []

    def test_reload_profiles_detects_new_profile(self, test_base_path):
        tools = MultiProfileTools(test_base_path)
        initial_count = len(tools.profiles)

        new_profile_dir = os.path.join(test_base_path, 'input-parameters', 'newprofile')
        shutil.copytree(
            os.path.join(test_base_path, 'input-parameters', 'testprofile'),
            new_profile_dir
        )

        try:
            result = tools.reload_profiles()
            assert 'newprofile' in result['changes']['added']
            assert 'newprofile' in tools.profiles
            assert len(tools.profiles) == initial_count + 1
        finally:
            shutil.rmtree(new_profile_dir, ignore_errors=True)

    def test_reload_profiles_detects_removed_profile(self, test_base_path):
        temp_profile_dir = os.path.join(test_base_path, 'input-parameters', 'tempprofile')
        shutil.copytree(
            os.path.join(test_base_path, 'input-parameters', 'testprofile'),
            temp_profile_dir
        )

        tools = MultiProfileTools(test_base_path)
        assert 'tempprofile' in tools.profiles
        initial_count = len(tools.profiles)

        shutil.rmtree(temp_profile_dir)
        result = tools.reload_profiles()

        assert 'tempprofile' in result['changes']['removed']
        assert 'tempprofile' not in tools.profiles
        assert len(tools.profiles) == initial_count - 1


class TestEdgeCases:
    """Test edge cases and error handling."""

    def test_load_missing_profile(self, test_base_path):
        with pytest.raises(FileNotFoundError):
            ScheduleTools(test_base_path, 'nonexistent_profile')

    def test_multi_tools_with_invalid_base_path(self):
        tools = MultiProfileTools('/nonexistent/path')
        assert len(tools.profiles) == 0
        assert tools.default_profile is None
        with pytest.raises(ValueError):
            tools.get_month_summary(2025, 6)

    def test_broken_profile_is_reported(self, test_base_path):
        broken_dir = os.path.join(test_base_path, 'input-parameters', 'broken')
        os.makedirs(broken_dir)
        with open(os.path.join(broken_dir, 'profile.json'), 'w') as f:
            f.write('{"financialSettings": {"overtimeMultiplier": "abc"}}')

        try:
            tools = MultiProfileTools(test_base_path)
            assert 'broken' not in tools.profiles
            assert 'broken' in tools.list_profiles()['failed_profiles']
            with pytest.raises(ValueError) as exc:
                tools.get_month_summary(2025, 6, 'broken')
            assert 'failed to load' in str(exc.value)
        finally:
            shutil.rmtree(broken_dir, ignore_errors=True)
