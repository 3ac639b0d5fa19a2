"""
End-to-end tests for parse_tsurf / TSurfParser.
"""

import numpy as np
import pytest

from gocadtsurf import StructuralError, TSurfParseOptions, TSurfParser, parse_tsurf
from conftest import tsurf


# ============== Scenarios ==============

class TestScenarios:
    def test_scenario_a(self, scenario_a):
        """Plain triangle, no properties."""
        result = parse_tsurf(scenario_a)

        assert result.mesh.n_points == 3
        assert result.mesh.n_cells == 1
        assert result.stats.vertex_count == 3
        assert result.stats.triangle_count == 1
        assert result.stats.skipped_triangle_count == 0
        assert result.properties == ()

    def test_scenario_b(self, scenario_b):
        """One scalar property, values in vertex order."""
        result = parse_tsurf(scenario_b)

        assert [p.name for p in result.properties] == ["depth"]
        assert result.properties[0].size == 1
        np.testing.assert_array_equal(result.mesh.point_data["depth"], [10.0, 20.0, 30.0])

    def test_realistic_file(self, full_surface):
        result = parse_tsurf(full_surface)

        assert result.stats.vertex_count == 4  # ATOM shares by default
        assert result.stats.triangle_count == 2
        assert result.stats.skipped_triangle_count == 0

        depth = result.find_property("depth")
        dip = result.find_property("dip")
        assert (depth.unit, depth.kind, depth.no_data) == ("m", "Depth", -9999.0)
        assert (dip.unit, dip.kind) == ("deg", "Angle")

        values = result.mesh.point_data["depth"]
        assert values[0] == 100.0
        assert np.isnan(values[1])
        assert np.isnan(result.mesh.point_data["dip"][2])


# ============== Statistics ==============

class TestStatistics:
    def test_well_formed_counts(self):
        text = tsurf(
            "VRTX 5 0 0 0",
            "VRTX 9 1 0 0",
            "VRTX 2 0 1 0",
            "VRTX 4 1 1 0",
            "TRGL 5 9 2",
            "TRGL 9 4 2",
        )
        stats = parse_tsurf(text).stats
        assert (stats.vertex_count, stats.triangle_count, stats.skipped_triangle_count) == (4, 2, 0)

    def test_undeclared_id_skips_exactly_one(self, scenario_a):
        text = scenario_a.replace("TRGL 1 2 3", "TRGL 1 2 3\nTRGL 1 2 77")
        stats = parse_tsurf(text).stats
        assert stats.triangle_count == 1
        assert stats.skipped_triangle_count == 1

    def test_degenerate_triangle_skips_exactly_one(self, scenario_a):
        text = scenario_a.replace("TRGL 1 2 3", "TRGL 1 2 3\nTRGL 2 2 3")
        stats = parse_tsurf(text).stats
        assert stats.triangle_count == 1
        assert stats.skipped_triangle_count == 1

    def test_forward_reference_is_skipped(self):
        """Triangles must only use ids known at the time they are read."""
        text = tsurf(
            "VRTX 1 0 0 0",
            "VRTX 2 1 0 0",
            "VRTX 3 0 1 0",
            "TRGL 1 2 4",
            "VRTX 4 1 1 0",
            "TRGL 2 4 3",
        )
        stats = parse_tsurf(text).stats
        assert stats.triangle_count == 1
        assert stats.skipped_triangle_count == 1


# ============== ATOM ==============

class TestAtoms:
    TEXT = tsurf(
        "PROPERTIES depth",
        "PVRTX 1 0 0 0 10",
        "PVRTX 2 1 0 0 20",
        "PVRTX 3 0 1 0 30",
        "ATOM 4 2",
        "TRGL 1 4 3",
    )

    def test_share_mode(self):
        result = parse_tsurf(self.TEXT, share_atom_points=True)
        assert result.stats.vertex_count == 3
        np.testing.assert_array_equal(result.mesh.faces, [3, 0, 1, 2])

    def test_duplicate_mode(self):
        result = parse_tsurf(self.TEXT, shareAtomPoints=False)
        mesh = result.mesh

        assert result.stats.vertex_count == 4
        np.testing.assert_array_equal(mesh.points[3], mesh.points[1])
        assert mesh.point_data["depth"][3] == 20.0
        np.testing.assert_array_equal(mesh.faces, [3, 0, 3, 2])

    def test_atom_to_unknown_vertex_causes_triangle_skip(self):
        text = self.TEXT.replace("ATOM 4 2", "ATOM 4 99")
        with pytest.raises(StructuralError):
            parse_tsurf(text)

    def test_atom_to_unknown_vertex_counts_skip(self):
        text = self.TEXT.replace("ATOM 4 2", "ATOM 4 99") + "TRGL 1 2 3\n"
        stats = parse_tsurf(text).stats
        assert stats.triangle_count == 1
        assert stats.skipped_triangle_count == 1


# ============== Properties ==============

class TestProperties:
    def test_esizes(self):
        text = tsurf(
            "PROPERTIES vec scal",
            "ESIZES 2 1",
            "PVRTX 1 0 0 0 1 2 3",
            "PVRTX 2 1 0 0 4 5 6",
            "PVRTX 3 0 1 0 7 8 9",
            "TRGL 1 2 3",
        )
        result = parse_tsurf(text)

        vec = result.find_property("vec")
        scal = result.find_property("scal")
        assert vec.size == 2
        assert scal.size == 1
        assert result.mesh.point_data["vec"].shape == (3, 2)
        assert result.mesh.point_data["vec"].size == result.stats.vertex_count * 2
        np.testing.assert_array_equal(result.mesh.point_data["vec"][1], [4.0, 5.0])
        np.testing.assert_array_equal(result.mesh.point_data["scal"], [3.0, 6.0, 9.0])

    def test_extra_columns_are_auto_named_and_backfilled(self):
        text = tsurf(
            "PROPERTIES depth",
            "PVRTX 1 0 0 0 10",
            "PVRTX 2 1 0 0 20",
            "PVRTX 3 0 1 0 30 0.5",
            "TRGL 1 2 3",
        )
        result = parse_tsurf(text)

        assert [p.name for p in result.properties] == ["depth", "prop_2"]
        extra = result.mesh.point_data["prop_2"]
        assert np.isnan(extra[:2]).all()
        assert extra[2] == 0.5

    def test_auto_names_without_declaration(self):
        text = tsurf(
            "PVRTX 1 0 0 0 1 2",
            "PVRTX 2 1 0 0 3 4",
            "PVRTX 3 0 1 0 5 6",
            "TRGL 1 2 3",
        )
        result = parse_tsurf(text)
        assert [p.name for p in result.properties] == ["prop_1", "prop_2"]
        np.testing.assert_array_equal(result.mesh.point_data["prop_2"], [2.0, 4.0, 6.0])

    def test_vertices_before_declaration_get_nan(self):
        text = tsurf(
            "VRTX 1 0 0 0",
            "PROPERTIES depth",
            "PVRTX 2 1 0 0 20",
            "PVRTX 3 0 1 0 30",
            "TRGL 1 2 3",
        )
        values = parse_tsurf(text).mesh.point_data["depth"]
        assert np.isnan(values[0])
        np.testing.assert_array_equal(values[1:], [20.0, 30.0])

    def test_declared_but_never_filled_property(self, scenario_a):
        result = parse_tsurf("PROPERTIES depth\n" + scenario_a)
        assert [p.name for p in result.properties] == ["depth"]
        assert np.isnan(result.mesh.point_data["depth"]).all()

    def test_non_numeric_property_token_becomes_nan(self):
        text = tsurf(
            "PROPERTIES depth",
            "PVRTX 1 0 0 0 abc",
            "PVRTX 2 1 0 0 inf",
            "PVRTX 3 0 1 0 3",
            "TRGL 1 2 3",
        )
        values = parse_tsurf(text).mesh.point_data["depth"]
        assert np.isnan(values[:2]).all()
        assert values[2] == 3.0

    def test_header_after_geometry_still_applies(self, scenario_b):
        text = scenario_b + "PROPERTY_CLASS_HEADER depth {\nunit: m\n}\n"
        assert parse_tsurf(text).properties[0].unit == "m"

    def test_header_for_unknown_property_is_dropped(self, scenario_b):
        text = "PROPERTY_CLASS_HEADER nothing {\nunit: m\n}\n" + scenario_b
        result = parse_tsurf(text)
        assert result.properties[0].unit is None

    def test_header_block_lines_are_not_records(self, scenario_a):
        text = "PROPERTY_CLASS_HEADER depth {\nVRTX 99 5 5 5\n}\n" + scenario_a
        assert parse_tsurf(text).stats.vertex_count == 3

    def test_redeclared_properties_in_swapped_order(self):
        text = tsurf(
            "PROPERTIES a b",
            "PVRTX 1 0 0 0 1 2",
            "PVRTX 2 1 0 0 3 4",
            "PVRTX 3 0 1 0 5 6",
            "PROPERTIES b a",
            "PROPERTY_CLASS_HEADER b {",
            "unit: m",
            "}",
            "TRGL 1 2 3",
        )
        result = parse_tsurf(text)
        assert [p.name for p in result.properties] == ["b", "a"]
        assert result.find_property("b").unit == "m"
        np.testing.assert_array_equal(result.mesh.point_data["b"], [1.0, 3.0, 5.0])


# ============== No-data ==============

class TestNoData:
    TEXT = tsurf(
        "PROPERTIES depth",
        "NO_DATA_VALUES -9999",
        "PVRTX 1 0 0 0 -9999",
        "PVRTX 2 1 0 0 20",
        "PVRTX 3 0 1 0 -9999",
        "TRGL 1 2 3",
    )

    def test_enabled(self):
        result = parse_tsurf(self.TEXT)
        values = result.mesh.point_data["depth"]
        assert np.isnan(values[[0, 2]]).all()
        assert values[1] == 20.0
        assert result.properties[0].no_data == -9999.0

    def test_disabled(self):
        result = parse_tsurf(self.TEXT, no_data_to_nan=False)
        np.testing.assert_array_equal(result.mesh.point_data["depth"], [-9999.0, 20.0, -9999.0])
        assert result.properties[0].no_data == -9999.0

    def test_declared_after_values(self):
        text = self.TEXT.replace("NO_DATA_VALUES -9999\n", "") + "NO_DATA_VALUES -9999\n"
        values = parse_tsurf(text).mesh.point_data["depth"]
        assert np.isnan(values[[0, 2]]).all()


# ============== Errors & Robustness ==============

class TestStructuralErrors:
    def test_no_vertices(self):
        with pytest.raises(StructuralError, match="no vertices"):
            parse_tsurf("TRGL 1 2 3\n")

    def test_no_valid_triangles(self):
        with pytest.raises(StructuralError, match="no valid triangles"):
            parse_tsurf(tsurf("VRTX 1 0 0 0", "VRTX 2 1 0 0", "TRGL 1 2 2"))

    def test_empty_input(self):
        with pytest.raises(StructuralError):
            parse_tsurf("")

    def test_structural_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_tsurf("# nothing here\n")


class TestRobustness:
    def test_end_stops_scanning(self, scenario_a):
        text = scenario_a + "VRTX 4 5 5 5\nTRGL 1 2 4\n"
        result = parse_tsurf(text)
        assert result.stats.vertex_count == 3
        assert result.stats.skipped_triangle_count == 0

    def test_windows_line_endings(self, scenario_b):
        result = parse_tsurf(scenario_b.replace("\n", "\r\n"))
        np.testing.assert_array_equal(result.mesh.point_data["depth"], [10.0, 20.0, 30.0])

    def test_malformed_vertex_records_are_skipped(self, scenario_a):
        text = "VRTX 8 0 0\nVRTX 9 x 0 0\nVRTX 10 nan 0 0\n" + scenario_a
        assert parse_tsurf(text).stats.vertex_count == 3

    def test_short_triangle_record_is_ignored(self, scenario_a):
        text = scenario_a.replace("TRGL 1 2 3", "TRGL 1 2\nTRGL 1 2 3")
        stats = parse_tsurf(text).stats
        assert stats.triangle_count == 1
        assert stats.skipped_triangle_count == 0

    def test_lowercase_keywords(self, scenario_a):
        assert parse_tsurf(scenario_a.lower()).stats.triangle_count == 1

    def test_parser_instances_do_not_share_state(self, scenario_a, scenario_b):
        parser = TSurfParser(TSurfParseOptions())
        first = parser.parse(scenario_b)
        second = parser.parse(scenario_a)
        assert len(first.properties) == 1
        assert second.properties == ()

    def test_options_dict(self, scenario_a):
        result = parse_tsurf(scenario_a, {"computeNormals": True})
        assert "Normals" in result.mesh.point_data

    def test_unknown_option_rejected(self, scenario_a):
        with pytest.raises(ValueError, match="Unknown"):
            parse_tsurf(scenario_a, {"colour": "red"})
