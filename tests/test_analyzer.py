"""End-to-end tests for the analysis API and pipeline."""

import asyncio
import json

import pytest

from portability_insight import (
    DEFAULT_CATALOG,
    AnalysisResult,
    ArchiveCorruptError,
    DependencyStatus,
    PatternCatalog,
    Severity,
    analyze,
    analyze_async,
)
from portability_insight.config import AnalysisConfig, ScoreWeights
from portability_insight.pipeline import AnalysisRun


def _comparable(result):
    return (
        result.score,
        result.platform,
        result.issues,
        result.dependencies,
        result.recommendations,
    )


class TestScenarios:
    """Reference scenarios for the analysis engine."""

    def test_lovable_project(self, lovable_archive):
        """Proprietary dependency plus proprietary import scores 75 and names Lovable."""
        result = analyze(lovable_archive)

        assert [(d.name, d.status) for d in result.dependencies] == [
            ("@lovable/core@1.0.0", DependencyStatus.INCOMPATIBLE),
            ("react@18.2.0", DependencyStatus.COMPATIBLE),
        ]
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.severity is Severity.CRITICAL
        assert "@lovable" in issue.pattern
        assert issue.file == "src/App.tsx"
        assert issue.line == 1
        assert result.score == 75
        assert result.platform == "Lovable"
        assert result.recommendations[-3:] == list(DEFAULT_CATALOG.generic_advice)
        assert DEFAULT_CATALOG.remove_packages_advice in result.recommendations

    def test_bolt_file(self, make_zip):
        """A .bolt file anywhere is one file-level critical issue."""
        result = analyze(make_zip({"deep/nested/.bolt": "{}", "src/main.ts": "export {}"}))
        assert len(result.issues) == 1
        assert result.issues[0].severity is Severity.CRITICAL
        assert result.issues[0].line is None
        assert result.issues[0].pattern == ".bolt"
        assert result.platform == "Bolt"
        assert result.score == 85

    def test_single_warning_scores_100(self, local_hook_archive):
        result = analyze(local_hook_archive)
        assert [i.severity for i in result.issues] == [Severity.WARNING]
        assert result.score == 100

    def test_local_hook_is_one_warning(self, local_hook_archive):
        """@/hooks/use-toast without a platform prefix is exactly one warning."""
        result = analyze(local_hook_archive)
        assert len(result.issues) == 1
        assert result.issues[0].severity is Severity.WARNING
        assert result.platform is None

    def test_empty_archive(self, empty_archive):
        result = analyze(empty_archive)
        assert result.score == 100
        assert result.issues == []
        assert result.dependencies == []
        assert result.platform is None
        assert result.total_files == 0
        assert result.analyzed_files == 0
        assert result.recommendations == list(DEFAULT_CATALOG.generic_advice)

    def test_no_manifest_no_sources(self, make_zip):
        result = analyze(make_zip({"README.md": "# demo", "public/favicon.ico": b"\x00\x01"}))
        assert result.score == 100
        assert result.issues == []
        assert result.dependencies == []
        assert result.platform is None

    def test_invalid_manifest_is_absorbed(self, make_zip):
        result = analyze(make_zip({"package.json": "{ not json", "src/a.ts": ""}))
        assert result.dependencies == []
        assert result.score == 100

    def test_node_modules_ignored(self, make_zip):
        blob = make_zip(
            {
                "node_modules/@lovable/core/package.json": '{"dependencies": {"@lovable/x": "1"}}',
                "node_modules/@lovable/core/index.js": "require('@lovable/x')",
            }
        )
        result = analyze(blob)
        assert result.issues == []
        assert result.dependencies == []
        assert result.analyzed_files == 0
        assert result.total_files == 2

    def test_backslash_node_modules_ignored(self, make_zip):
        """Entries written with Windows separators are still excluded."""
        blob = make_zip({"node_modules\\@lovable\\x.js": "import '@lovable/core'"})
        result = analyze(blob)
        assert result.analyzed_files == 0
        assert result.issues == []
        assert result.total_files == 1


class TestResultInvariants:
    """Properties that hold for every analysis."""

    def test_counts(self, make_zip):
        blob = make_zip(
            {"package.json": "{}", "src/a.ts": "", "src/b.tsx": "", "style.css": ""},
            dirs=("src/",),
        )
        result = analyze(blob)
        assert result.total_files == 5
        assert result.analyzed_files == 2
        assert result.analyzed_files <= result.total_files

    def test_idempotent(self, lovable_archive):
        assert _comparable(analyze(lovable_archive)) == _comparable(analyze(lovable_archive))

    def test_recommendations_unique(self, make_zip):
        lines = ['import x from "@lovable/a";', 'import { useToast } from "@/hooks/use-toast";']
        blob = make_zip({f"src/f{i}.ts": "\n".join(lines) for i in range(4)})
        result = analyze(blob)
        assert len(result.recommendations) == len(set(result.recommendations))

    def test_extracted_files_is_full_table(self, lovable_archive):
        result = analyze(lovable_archive)
        assert set(result.extracted_files) == {"package.json", "src/App.tsx"}

    def test_to_dict_wire_shape(self, lovable_archive):
        data = analyze(lovable_archive).to_dict()
        assert set(data) == {
            "score",
            "platform",
            "totalFiles",
            "analyzedFiles",
            "issues",
            "dependencies",
            "recommendations",
            "extractedFiles",
        }
        assert data["dependencies"][0] == {
            "name": "@lovable/core@1.0.0",
            "type": "Package",
            "status": "incompatible",
            "note": "Proprietary package - must be removed",
        }
        assert data["issues"][0]["severity"] == "critical"
        json.dumps(data)

    def test_to_dict_omits_missing_line(self, make_zip):
        data = analyze(make_zip({".lovable": ""})).to_dict(include_files=False)
        assert "line" not in data["issues"][0]
        assert "extractedFiles" not in data


class TestErrors:
    """Failure behaviour."""

    def test_corrupt_blob(self):
        with pytest.raises(ArchiveCorruptError):
            analyze(b"PK\x03\x04 this is not really a zip")

    def test_callback_exception_aborts(self, lovable_archive):
        """A throwing progress callback aborts the run with its own exception."""
        seen = []

        def callback(percent, message):
            seen.append(percent)
            if percent >= 20:
                raise KeyError("ui closed")

        with pytest.raises(KeyError):
            analyze(lovable_archive, callback)
        assert seen == [5, 15, 20]


class TestProgress:
    """Checkpoint sequence delivered to the callback."""

    def test_checkpoints_without_manifest(self, empty_archive):
        calls = []
        analyze(empty_archive, lambda p, m: calls.append(p))
        assert calls == [5, 15, 20, 35, 40, 92, 96, 100]

    def test_checkpoints_with_manifest_and_sources(self, make_zip):
        files = {"package.json": "{}"}
        files.update({f"src/f{i}.ts": "" for i in range(12)})
        calls = []
        analyze(make_zip(files), lambda p, m: calls.append((p, m)))
        percents = [p for p, _ in calls]
        assert percents == [5, 15, 20, 30, 35, 40, 40, 60, 81, 85, 92, 96, 100]
        assert calls[-1] == (100, "Analysis complete!")
        assert percents == sorted(percents)


class TestConfiguration:
    """Catalog and config injection."""

    def test_custom_catalog(self, make_zip):
        catalog = PatternCatalog(files=(".windsurf",))
        result = analyze(make_zip({".windsurf": "", ".bolt": ""}), catalog=catalog)
        assert [i.pattern for i in result.issues] == [".windsurf"]

    def test_catalog_file_from_config(self, make_zip, tmp_path):
        path = tmp_path / "catalog.toml"
        path.write_text('files = [".windsurf"]\n')
        config = AnalysisConfig(catalog_file=str(path))
        result = analyze(make_zip({".windsurf": ""}), config=config)
        assert [i.pattern for i in result.issues] == [".windsurf"]

    def test_weights_from_config(self, lovable_archive):
        config = AnalysisConfig(weights=ScoreWeights(critical_issue=20))
        assert analyze(lovable_archive, config=config).score == 70


class TestAsync:
    """analyze_async on an event loop."""

    def test_same_result_as_sync(self, lovable_archive):
        result = asyncio.run(analyze_async(lovable_archive))
        assert isinstance(result, AnalysisResult)
        assert _comparable(result) == _comparable(analyze(lovable_archive))

    def test_progress_interleaves_with_other_tasks(self, make_zip):
        """Other tasks get to run between pipeline stages."""
        blob = make_zip({f"src/f{i}.ts": "" for i in range(10)})
        events = []

        async def ticker():
            for _ in range(3):
                events.append("tick")
                await asyncio.sleep(0)

        async def main():
            task = asyncio.ensure_future(ticker())
            result = await analyze_async(blob, lambda p, m: events.append(p))
            await task
            return result

        result = asyncio.run(main())
        assert result.analyzed_files == 10
        assert events.index("tick") < events.index(100)


class TestAnalysisRun:
    """Step generator behaviour."""

    def test_stage_names(self, make_zip):
        blob = make_zip({f"src/f{i}.ts": "" for i in range(10)})
        run = AnalysisRun(blob, config=AnalysisConfig(progress_every=5))
        assert list(run.steps()) == [
            "extract",
            "manifest",
            "config_files",
            "sources",
            "sources",
            "sources",
            "score",
            "recommend",
        ]
        assert run.result is not None
        assert run.result.analyzed_files == 10

    def test_result_unset_until_done(self, empty_archive):
        run = AnalysisRun(empty_archive)
        steps = run.steps()
        next(steps)
        assert run.result is None

    def test_not_reusable(self, empty_archive):
        run = AnalysisRun(empty_archive)
        for _ in run.steps():
            pass
        with pytest.raises(RuntimeError):
            next(run.steps())
