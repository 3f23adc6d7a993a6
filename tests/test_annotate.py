"""
tests/test_annotate.py - Bulk Annotation Tests

Validates:
1. Order, length and pass-through of caller fields
2. Input records are never mutated
3. A large synthetic field (40,000 athletes) matches per-record scans
4. DataFrame annotation matches record annotation
5. Configured annotators (gender normalization, age-graded times)

Author: Age Grade Tables Project
License: MIT
"""

import copy
import numpy as np
import pandas as pd
import pytest
from pydantic import ValidationError
from age_grade_tables import (
    AnnotatorConfig,
    BulkAnnotator,
    TableName,
    age_graded_time,
    annotate_bulk,
    annotate_frame,
    build_lookup_index,
    create_annotator,
    get_factor_by_age_and_gender,
    get_table,
    normalize_gender,
)


def generate_athletes(count: int, seed: int = 2025):
    """Synthetic athletes, including some with no factor (unknown gender or age)."""
    rng = np.random.default_rng(seed)
    genders = rng.choice(['M', 'F', 'M', 'F', 'X'], size=count)
    ages = rng.integers(-2, 110, size=count)
    times = rng.integers(28800, 36000, size=count)
    return [
        {
            'id': i + 1,
            'name': f"Athlete {i + 1}",
            'age': int(ages[i]),
            'gender': str(genders[i]),
            'finish_time': int(times[i]),
        }
        for i in range(count)
    ]


@pytest.fixture(scope="module")
def ironman_table():
    return get_table('2025_ironman')


@pytest.fixture(scope="module")
def ironman_index(ironman_table):
    return build_lookup_index(ironman_table)


class TestAnnotateBulk:
    """annotate_bulk keeps order, length and every caller field."""

    def test_order_and_fields_preserved(self, ironman_index):
        records = [
            {'id': 1, 'age': 35, 'gender': 'M', 'club': 'Tri NYC'},
            {'id': 2, 'age': 999, 'gender': 'M'},
            {'id': 3, 'age': 35, 'gender': 'X'},
            {'id': 4, 'age': 0, 'gender': 'F'},
        ]
        results = annotate_bulk(ironman_index, records)

        assert [r['id'] for r in results] == [1, 2, 3, 4]
        assert [r['factor'] for r in results] == [0.98, None, None, 1.0]
        assert results[0]['club'] == 'Tri NYC'

    def test_input_not_mutated(self, ironman_index):
        records = [{'age': 35, 'gender': 'M', 'splits': [1, 2, 3]}]
        snapshot = copy.deepcopy(records)

        results = annotate_bulk(ironman_index, records)

        assert records == snapshot
        assert 'factor' not in records[0]
        assert results[0] is not records[0]

    def test_missing_fields_get_absent_factor(self, ironman_index):
        results = annotate_bulk(ironman_index, [{'name': 'no age or gender'}])
        assert results == [{'name': 'no age or gender', 'factor': None}]

    def test_custom_field_names(self, ironman_index):
        records = [{'sex': 'F', 'age_on_race_day': 35}]
        results = annotate_bulk(ironman_index, records,
                                gender_field='sex', age_field='age_on_race_day',
                                factor_field='ag_factor')
        assert results[0]['ag_factor'] == 0.98

    def test_empty_batch(self, ironman_index):
        assert annotate_bulk(ironman_index, []) == []


class TestLargeBatchEquivalence:
    """Bulk annotation of a large field equals per-record point lookups."""

    COUNT = 40000

    def test_bulk_matches_scan(self, ironman_table, ironman_index):
        athletes = generate_athletes(self.COUNT)
        results = annotate_bulk(ironman_index, athletes)

        assert len(results) == self.COUNT
        for athlete, result in zip(athletes, results):
            assert result['id'] == athlete['id']
            expected = get_factor_by_age_and_gender(ironman_table, athlete['gender'], athlete['age'])
            assert result['factor'] == expected, \
                f"Athlete {athlete['id']} ({athlete['gender']}/{athlete['age']}): " \
                f"bulk={result['factor']}, scan={expected}"

    def test_frame_matches_records(self, ironman_index):
        athletes = generate_athletes(self.COUNT, seed=7)
        records = annotate_bulk(ironman_index, athletes)
        frame = annotate_frame(ironman_index, pd.DataFrame(athletes))

        expected = np.array([np.nan if r['factor'] is None else r['factor'] for r in records])
        np.testing.assert_array_equal(frame['factor'].to_numpy(), expected)
        assert frame['id'].tolist() == [a['id'] for a in athletes]

    def test_string_and_mixed_ages_agree(self, ironman_table, ironman_index):
        """Only real numbers count as ages, on every lookup path."""
        athletes = [
            {'gender': 'M', 'age': '35'},
            {'gender': 'M', 'age': 'N/A'},
            {'gender': 'M', 'age': None},
            {'gender': 'M', 'age': 35},
            {'gender': 'F', 'age': 35.0},
            {'gender': 'F', 'age': 35.5},
        ]
        records = annotate_bulk(ironman_index, athletes)
        frame = annotate_frame(ironman_index, pd.DataFrame(athletes))

        expected = [None, None, None, 0.98, 0.98, None]
        assert [r['factor'] for r in records] == expected
        np.testing.assert_array_equal(
            frame['factor'].to_numpy(),
            [np.nan if f is None else f for f in expected],
        )
        scan = [get_factor_by_age_and_gender(ironman_table, a['gender'], a['age'])
                for a in athletes[:5]]
        assert scan == expected[:5]

    def test_string_age_column(self, ironman_index):
        """A CSV age column read as strings gets no factors on either path."""
        frame = pd.DataFrame({'gender': ['M', 'F'], 'age': ['35', '40']})
        result = annotate_frame(ironman_index, frame)
        records = annotate_bulk(ironman_index, frame.to_dict('records'))

        assert result['factor'].isna().all()
        assert [r['factor'] for r in records] == [None, None]


class TestAnnotateFrame:
    """DataFrame annotation returns an annotated copy."""

    def test_returns_copy(self, ironman_index):
        frame = pd.DataFrame({'age': [35, 999], 'gender': ['F', 'F']})
        result = annotate_frame(ironman_index, frame)

        assert 'factor' not in frame.columns
        np.testing.assert_array_equal(result['factor'].to_numpy(), [0.98, np.nan])

    def test_missing_column(self, ironman_index):
        with pytest.raises(ValueError, match="missing required columns"):
            annotate_frame(ironman_index, pd.DataFrame({'age': [35]}))


class TestAgeGradedTime:

    def test_divides_by_factor(self):
        assert age_graded_time(36000, 0.9) == pytest.approx(40000.0)

    def test_absent_factor(self):
        assert age_graded_time(36000, None) is None
        assert age_graded_time(36000, float('nan')) is None
        assert age_graded_time(None, 0.9) is None

    def test_absent_finish_time(self):
        assert age_graded_time(float('nan'), 0.9) is None
        assert age_graded_time(np.nan, None) is None


class TestBulkAnnotator:
    """Configured annotator built through create_annotator."""

    def test_default_config(self):
        annotator = create_annotator()
        assert annotator.config.table is TableName.IRONMAN_2025
        assert annotator.factor_for('M', 35) == 0.98

    def test_table_from_dict(self):
        annotator = create_annotator({'table': '2025_ironman703'})
        assert annotator.config.table is TableName.IRONMAN_703_2025
        assert annotator.factor_for('M', 35) == get_factor_by_age_and_gender(
            get_table('2025_ironman703'), 'M', 35)

    def test_unknown_table_in_config(self):
        with pytest.raises(ValidationError, match="Unknown table name: bogus"):
            create_annotator({'table': 'bogus'})

    def test_gender_normalization_keeps_original_token(self):
        annotator = create_annotator({'normalize_gender': True})
        records = [{'age': 35, 'gender': 'male'}, {'age': 35, 'gender': ' f '}, {'age': 35, 'gender': 'X'}]
        results = annotator.annotate(records)

        assert [r['factor'] for r in results] == [0.98, 0.98, None]
        assert [r['gender'] for r in results] == ['male', ' f ', 'X']

    def test_without_normalization_spellings_are_absent(self):
        annotator = create_annotator()
        assert annotator.annotate([{'age': 35, 'gender': 'male'}])[0]['factor'] is None

    def test_age_graded_time_records(self):
        annotator = create_annotator({'time_field': 'finish_time'})
        results = annotator.annotate([
            {'age': 35, 'gender': 'M', 'finish_time': 34300},
            {'age': 35, 'gender': 'X', 'finish_time': 34300},
        ])
        assert results[0]['age_graded_time'] == pytest.approx(34300 / 0.98)
        assert results[1]['age_graded_time'] is None

    def test_age_graded_time_frame(self):
        config = AnnotatorConfig(time_field='finish_time', normalize_gender=True)
        annotator = BulkAnnotator(config)
        frame = pd.DataFrame({
            'age': [35, 35],
            'gender': ['Female', 'X'],
            'finish_time': [34300, 34300],
        })
        result = annotator.annotate_frame(frame)

        assert result['gender'].tolist() == ['Female', 'X']
        assert result['age_graded_time'].iloc[0] == pytest.approx(34300 / 0.98)
        assert np.isnan(result['age_graded_time'].iloc[1])

    def test_missing_time_column(self):
        annotator = create_annotator({'time_field': 'finish_time'})
        with pytest.raises(ValueError, match="missing time column"):
            annotator.annotate_frame(pd.DataFrame({'age': [35], 'gender': ['M']}))

    def test_shared_index(self, ironman_index):
        annotator = BulkAnnotator(AnnotatorConfig(), index=ironman_index)
        assert annotator.index is ironman_index


class TestNormalizeGender:

    @pytest.mark.parametrize("value, expected", [
        ('M', 'M'), ('m', 'M'), ('Male', 'M'), ('F', 'F'), ('female', 'F'),
        ('X', 'X'), (None, None),
    ])
    def test_aliases(self, value, expected):
        assert normalize_gender(value) == expected
