"""Tests for optimizer/collapser.py - root-cause collapsing."""

import logging

from stylelens.config import OptimizerConfig
from stylelens.graph import build_dependency_graph, normalize_path
from stylelens.optimizer.collapser import optimize_entities, optimize_findings, optimize_results
from stylelens.optimizer.models import Entity, Finding

REDUCED_MOTION = "[Warning] Add prefers-reduced-motion media query for animations"


def _root_causes(findings):
    return [f for f in findings if f.is_root_cause]


# ── Flat findings ─────────────────────────────────────────────────


class TestOptimizeFindings:
    def test_collapses_to_shared_partial(self, animations_project, reduced_motion_findings):
        result = optimize_findings(reduced_motion_findings, animations_project)

        assert len(result.findings) == 1
        finding = result.findings[0]
        assert finding.file == normalize_path(animations_project / "_animations.scss")
        assert finding.is_root_cause
        assert finding.impact_count == 5
        assert finding.check == "reducedMotion"
        assert finding.message == REDUCED_MOTION
        assert finding.original_file == reduced_motion_findings[0].file
        assert sorted(finding.impacted_files) == sorted(
            normalize_path(f.file) for f in reduced_motion_findings
        )

    def test_stats(self, animations_project, reduced_motion_findings, button_finding):
        result = optimize_findings(reduced_motion_findings + [button_finding], animations_project)
        stats = result.stats
        assert stats.enabled
        assert stats.original_issue_count == 6
        assert stats.optimized_issue_count == 2
        assert stats.collapsed_count == 4
        assert stats.root_causes_found == 1

    def test_root_cause_takes_place_of_first_member(
        self, animations_project, reduced_motion_findings, button_finding
    ):
        findings = [button_finding] + reduced_motion_findings
        result = optimize_findings(findings, animations_project)
        assert result.findings[0] is button_finding
        assert result.findings[1].is_root_cause

    def test_independent_files_are_kept(self, make_project):
        root = make_project(
            {
                "_animations.scss": "",
                "component-a.scss": "@import 'animations';",
                "independent.scss": ".x { color: red; }",
            }
        )
        findings = [
            Finding(check="reducedMotion", message=REDUCED_MOTION, file=str(root / name))
            for name in ("component-a.scss", "independent.scss")
        ]
        result = optimize_findings(findings, root)
        assert result.findings == findings
        assert result.stats.root_causes_found == 0
        assert result.stats.collapsed_count == 0

    def test_min_group_size_not_reached(self, animations_project, reduced_motion_findings):
        config = OptimizerConfig(min_group_size=10)
        result = optimize_findings(reduced_motion_findings, animations_project, config)
        assert result.findings == reduced_motion_findings
        assert result.stats.optimized_issue_count == len(reduced_motion_findings)

    def test_disabled(self, animations_project, reduced_motion_findings):
        result = optimize_findings(
            reduced_motion_findings, animations_project, OptimizerConfig(enabled=False)
        )
        assert result.findings == reduced_motion_findings
        assert not result.stats.enabled

    def test_project_without_stylesheets(self, make_project, reduced_motion_findings):
        root = make_project({"index.html": ""}, name="empty")
        result = optimize_findings(reduced_motion_findings, root)
        assert result.findings == reduced_motion_findings
        assert result.stats.root_causes_found == 0

    def test_same_file_repeated_is_not_a_group(self, animations_project):
        path = str(animations_project / "component-1.scss")
        findings = [
            Finding(check="reducedMotion", message=REDUCED_MOTION, file=path, line=n)
            for n in (3, 9)
        ]
        result = optimize_findings(findings, animations_project)
        assert result.findings == findings

    def test_message_variants_group_together(self, animations_project):
        findings = [
            Finding(
                check="touchTargets",
                message=f"Touch target is {size}px at line {size}",
                file=str(animations_project / f"component-{i}.scss"),
            )
            for i, size in ((1, 24), (2, 32), (3, 20))
        ]
        result = optimize_findings(findings, animations_project)
        assert len(result.findings) == 1
        assert result.findings[0].message == "Touch target is 24px at line 24"
        assert result.findings[0].impact_count == 3

    def test_non_stylesheet_members_survive_all_files_mode(
        self, animations_project, reduced_motion_findings
    ):
        html = Finding(
            check="reducedMotion",
            message=REDUCED_MOTION,
            file=str(animations_project / "component.html"),
        )
        config = OptimizerConfig(scss_only=False)
        result = optimize_findings(reduced_motion_findings + [html], animations_project, config)
        assert len(result.findings) == 2
        assert result.findings[0].is_root_cause
        assert result.findings[1] is html

    def test_traversal_limit_keeps_group(self, make_project):
        root = make_project(
            {
                "_core.scss": "",
                "_base.scss": "@import 'core';",
                "_mid.scss": "@import 'base';",
                "c1.scss": "@import 'mid';",
                "c2.scss": "@import 'mid';",
            }
        )
        findings = [
            Finding(check="focusStyles", message="Missing :focus", file=str(root / name))
            for name in ("c1.scss", "c2.scss")
        ]
        result = optimize_findings(findings, root, OptimizerConfig(max_traversal_nodes=1))
        assert result.findings == findings
        assert result.stats.root_causes_found == 0

    def test_prebuilt_graph(self, animations_project, reduced_motion_findings):
        graph = build_dependency_graph(animations_project)
        result = optimize_findings(
            reduced_motion_findings, "/nonexistent/project", graph=graph
        )
        assert len(result.findings) == 1

    def test_conservation(self, animations_project, reduced_motion_findings, button_finding):
        findings = reduced_motion_findings + [button_finding]
        result = optimize_findings(findings, animations_project)
        assert result.stats.optimized_issue_count <= result.stats.original_issue_count
        assert {f.check for f in result.findings} <= {f.check for f in findings}


# ── Per-entity findings ───────────────────────────────────────────


def _entities(project, findings, button_finding):
    entities = [
        Entity(name=f"Component{i}", selector=f"app-component-{i}", issues=[finding])
        for i, finding in enumerate(findings, start=1)
    ]
    entities.append(Entity(name="ButtonComponent", selector="app-button", issues=[button_finding]))
    return entities


class TestOptimizeEntities:
    def test_root_cause_emitted_once_globally(
        self, animations_project, reduced_motion_findings, button_finding
    ):
        entities = _entities(animations_project, reduced_motion_findings, button_finding)
        result = optimize_entities(entities, animations_project)

        assert len(_root_causes(result.findings)) == 1
        assert result.entities[0].issues[0].is_root_cause
        assert all(e.issues == [] for e in result.entities[1:5])
        assert result.entities[5].issues == [button_finding]

    def test_counts(self, animations_project, reduced_motion_findings, button_finding):
        entities = _entities(animations_project, reduced_motion_findings, button_finding)
        result = optimize_entities(entities, animations_project)

        assert result.stats.original_issue_count == 6
        assert result.stats.optimized_issue_count == 2
        assert result.stats.root_causes_found == 1
        assert [e.original_issue_count for e in result.entities] == [1] * 6
        assert [e.optimized_issue_count for e in result.entities] == [1, 0, 0, 0, 0, 1]

    def test_same_collapse_in_many_entities(self, animations_project, reduced_motion_findings):
        # Every entity reports the whole set of stylesheets
        entities = [
            Entity(name=f"Route{n}", issues=list(reduced_motion_findings)) for n in range(3)
        ]
        result = optimize_entities(entities, animations_project)
        root_causes = _root_causes(result.findings)
        assert len(root_causes) == 1
        assert root_causes[0].impact_count == 5
        assert result.stats.optimized_issue_count == 1

    def test_entity_fields_preserved(self, animations_project, reduced_motion_findings):
        entities = [
            Entity(
                name="Component1",
                selector="app-one",
                issues=reduced_motion_findings[:1],
                extra={"path": "src/app/one"},
            )
        ]
        result = optimize_entities(entities, animations_project)
        assert result.entities[0].selector == "app-one"
        assert result.entities[0].extra == {"path": "src/app/one"}

    def test_disabled(self, animations_project, reduced_motion_findings, button_finding):
        entities = _entities(animations_project, reduced_motion_findings, button_finding)
        result = optimize_entities(entities, animations_project, OptimizerConfig(enabled=False))
        assert result.entities == entities
        assert not result.stats.enabled


# ── Result documents ──────────────────────────────────────────────


class TestOptimizeResults:
    def test_flat_document(self, animations_project, reduced_motion_findings, button_finding):
        document = {
            "tier": "full",
            "issues": [f.to_dict() for f in reduced_motion_findings + [button_finding]],
        }
        optimized = optimize_results(document, animations_project)

        assert optimized["tier"] == "full"
        assert optimized["totalIssues"] == 2
        assert optimized["optimization"] == {
            "enabled": True,
            "originalIssueCount": 6,
            "optimizedIssueCount": 2,
            "collapsedCount": 4,
            "rootCausesFound": 1,
        }
        root = optimized["issues"][0]
        assert root["isRootCause"] is True
        assert root["impactCount"] == 5
        assert root["file"] == normalize_path(animations_project / "_animations.scss")
        assert optimized["issues"][1]["check"] == "buttonNames"
        # Input document is not mutated
        assert len(document["issues"]) == 6

    def test_components_document(
        self, animations_project, reduced_motion_findings, button_finding
    ):
        entities = _entities(animations_project, reduced_motion_findings, button_finding)
        document = {"components": [e.to_dict() for e in entities], "issues": []}
        optimized = optimize_results(document, animations_project)

        assert optimized["componentCount"] == 2
        assert optimized["totalIssues"] == 2
        assert optimized["components"][1]["issues"] == []
        assert optimized["components"][1]["originalIssueCount"] == 1
        assert optimized["optimization"]["collapsedCount"] == 4

    def test_entities_document(self, animations_project, reduced_motion_findings, button_finding):
        entities = _entities(animations_project, reduced_motion_findings, button_finding)
        document = {"entities": [e.to_dict() for e in entities]}
        optimized = optimize_results(document, animations_project)
        assert "components" not in optimized
        assert optimized["entities"][0]["issues"][0]["isRootCause"] is True

    def test_disabled_returns_input(self, animations_project):
        document = {"issues": []}
        assert optimize_results(document, animations_project, OptimizerConfig(enabled=False)) is document

    def test_no_stylesheets_returns_input(self, make_project):
        root = make_project({"index.html": ""}, name="empty")
        document = {"issues": [{"check": "c", "message": "m", "file": "a.scss"}]}
        assert optimize_results(document, root) is document

    def test_unknown_shape_returns_input(self, animations_project):
        document = {"summary": {}}
        assert optimize_results(document, animations_project) is document

    def test_empty_components_list_is_entity_document(self, animations_project):
        document = {"components": [], "issues": [{"check": "c", "message": "m", "file": "a.scss"}]}
        optimized = optimize_results(document, animations_project)
        assert optimized["components"] == []
        assert optimized["componentCount"] == 0
        assert optimized["issues"] == document["issues"]
        assert optimized["optimization"]["originalIssueCount"] == 0


# ── Unscannable project root ──────────────────────────────────────


class TestMissingProjectRoot:
    def test_findings_returned_unchanged(self, tmp_path, reduced_motion_findings):
        result = optimize_findings(reduced_motion_findings, tmp_path / "gone")
        assert result.findings == reduced_motion_findings
        assert result.stats.collapsed_count == 0

    def test_entities_returned_unchanged(self, tmp_path, reduced_motion_findings, button_finding):
        entities = _entities(tmp_path, reduced_motion_findings, button_finding)
        result = optimize_entities(entities, tmp_path / "gone")
        assert result.entities == entities

    def test_document_returned_as_is(self, tmp_path, reduced_motion_findings):
        document = {"issues": [f.to_dict() for f in reduced_motion_findings]}
        assert optimize_results(document, tmp_path / "gone") is document

    def test_logs_warning(self, tmp_path, reduced_motion_findings, caplog):
        caplog.set_level(logging.WARNING, logger="stylelens")
        optimize_findings(reduced_motion_findings, tmp_path / "gone")
        assert "leaving findings unoptimized" in caplog.text


class TestCollapseLogging:
    def test_debug_log_reports_confidence(
        self, animations_project, reduced_motion_findings, caplog
    ):
        caplog.set_level(logging.DEBUG, logger="stylelens")
        optimize_findings(reduced_motion_findings, animations_project)
        assert "_animations.scss (confidence 1.00)" in caplog.text
