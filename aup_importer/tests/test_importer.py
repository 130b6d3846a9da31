"""End-to-end tests for importing legacy projects."""
import tempfile
import unittest
from pathlib import Path
import sys

import numpy as np
import soundfile as sf

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from aup_importer import (
    AUPImporter,
    AUPImportPlugin,
    ImporterConfig,
    InMemoryProject,
    LabelTrack,
    NoteTrack,
    ProgressReporter,
    ProgressResult,
    SampleFormat,
    Severity,
    TimeTrack,
    TqdmProgress,
    WaveTrack,
)
from aup_importer.builder import TIME_TRACK_BYPASS_MESSAGE
from aup_importer.tokenizer import PRE_1_0_MESSAGE

DEFAULT_ROOT = (
    'projname="{projname}" version="1.3.0" audacityversion="2.4.2" '
    'sel0="0.0" sel1="1.0" vpos="0" h="0.0" zoom="86.1328125" rate="44100.0"'
)

HEADER = (
    '<?xml version="1.0" standalone="no" ?>\n'
    '<!DOCTYPE project PUBLIC "-//audacityproject-1.3.0//DTD//EN" '
    '"http://audacity.sourceforge.net/xml/audacityproject-1.3.0.dtd" >\n'
)


def sequence(blocks, maxsamples="262144", sampleformat="262159", numsamples=None):
    """Sequence tag holding one waveblock per block file tag."""
    if numsamples is None:
        numsamples = 0
    body = "".join(
        f'<waveblock start="{start}">{block}</waveblock>' for start, block in blocks
    )
    return (
        f'<sequence maxsamples="{maxsamples}" sampleformat="{sampleformat}" '
        f'numsamples="{numsamples}">{body}</sequence>'
    )


def one_block_track(filename="e0000001.au", length=44100, sampleformat="262159",
                    maxsamples="262144"):
    block = f'<simpleblockfile filename="{filename}" len="{length}" min="-0.5" max="0.5" rms="0.35"/>'
    return (
        '<wavetrack name="Audio 1" channel="2" linked="0" mute="0" solo="0" '
        'height="150" minimized="0" isSelected="1" rate="44100" gain="1.0" pan="0.0">'
        '<waveclip offset="0.0" colorindex="0">'
        f'{sequence([(0, block)], maxsamples, sampleformat, length)}'
        '<envelope numpoints="0"/>'
        '</waveclip>'
        '</wavetrack>'
    )


class CancellingProgress(ProgressReporter):
    """Reporter that stops after a number of updates."""

    def __init__(self, after=0, result=ProgressResult.CANCELLED):
        self.after = after
        self.result = result
        self.updates = 0
        self.calls = []
        self.closed = False

    def update(self, done, total):
        self.updates += 1
        self.calls.append((done, total))
        if self.updates > self.after:
            return self.result
        return ProgressResult.SUCCESS

    def close(self):
        self.closed = True


class ProjectTestCase(unittest.TestCase):
    """Writes projects and their data folders into a scratch directory."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.tmp_dir = Path(self.tmp.name)
        self.samples = (0.5 * np.sin(2 * np.pi * 440 * np.arange(44100) / 44100)).astype(np.float32)

    def tearDown(self):
        self.tmp.cleanup()

    def write_block(self, data_dir, filename="e0000001.au", data=None, **kwargs):
        data_dir = Path(data_dir)
        target = data_dir / "e00" / "d00"
        target.mkdir(parents=True, exist_ok=True)
        if data is None:
            data = self.samples
        kwargs.setdefault("subtype", "FLOAT")
        sf.write(str(target / filename), data, 44100, format='AU', **kwargs)
        return target / filename

    def write_project(self, body, root=None, name="song", projname="song_data",
                      data_dir=True):
        if root is None:
            root = DEFAULT_ROOT.format(projname=projname)
        if data_dir:
            (self.tmp_dir / projname).mkdir(exist_ok=True)
        path = self.tmp_dir / f"{name}.aup"
        path.write_text(
            HEADER
            + f'<project xmlns="http://audacity.sourceforge.net/xml/" {root}>'
            + body
            + '</project>\n',
            encoding='utf-8'
        )
        return path

    def run_import(self, path, project=None, progress=None, config=None):
        project = project or InMemoryProject()
        importer = AUPImportPlugin().open(path, project, config=config)
        self.assertIsNotNone(importer)
        return project, importer.import_project(progress)


class TestSingleTrackImport(ProjectTestCase):
    """Test cases for a one-track, one-block project."""

    def test_block_present(self):
        self.write_block(self.tmp_dir / "song_data")
        path = self.write_project('<tags/>' + one_block_track())

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.SUCCESS)
        self.assertEqual(len(project.tracks), 1)
        track = project.tracks[0]
        self.assertIsInstance(track, WaveTrack)
        self.assertEqual(track.name, "Audio 1")
        self.assertEqual(track.total_samples(), 44100)

        clip = track.clips[0]
        self.assertIs(clip.sample_format, SampleFormat.FLOAT)
        self.assertTrue(clip.closed)
        self.assertEqual(clip.envelope.track_len, 1.0)
        np.testing.assert_array_equal(clip.samples(), self.samples)
        self.assertEqual(project.reports, [])

    def test_block_absent(self):
        (self.tmp_dir / "song_data").mkdir()
        path = self.write_project(one_block_track())

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.SUCCESS)
        clip = project.tracks[0].clips[0]
        self.assertEqual(clip.num_samples, 44100)
        self.assertFalse(clip.samples().any())
        self.assertEqual(project.reports, [(
            Severity.WARNING,
            "Missing project file e0000001.au\n\nInserting silence instead."
        )])

    def test_int16_block_present(self):
        int_data = (self.samples * 32767).astype(np.int16)
        self.write_block(self.tmp_dir / "song_data", data=int_data, subtype="PCM_16")
        path = self.write_project(
            one_block_track(sampleformat=str(0x00020001), maxsamples="5000")
        )

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.SUCCESS)
        clip = project.tracks[0].clips[0]
        self.assertIs(clip.sample_format, SampleFormat.INT16)
        self.assertEqual(clip.max_samples, 5000)
        self.assertEqual(clip.num_samples, 44100)
        np.testing.assert_array_equal(clip.samples(), int_data)
        self.assertEqual(project.reports, [])

    def test_int16_block_absent(self):
        path = self.write_project(
            one_block_track(sampleformat=str(0x00020001), maxsamples="5000")
        )

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.SUCCESS)
        samples = project.tracks[0].clips[0].samples()
        self.assertEqual(samples.dtype, np.int16)
        self.assertEqual(len(samples), 44100)
        self.assertFalse(samples.any())
        self.assertEqual(len(summary.warnings), 1)
        self.assertEqual([sev for sev, _ in project.reports], [Severity.WARNING])

    def test_summary_counts(self):
        self.write_block(self.tmp_dir / "song_data")
        path = self.write_project(one_block_track())

        _, summary = self.run_import(path)
        data = summary.to_dict()

        self.assertEqual(data["result"], "success")
        self.assertEqual(data["block_files"], 1)
        self.assertEqual(data["total_samples"], 44100)
        self.assertEqual(data["tracks"][0]["samples"], 44100)

    def test_same_file_imports_identically(self):
        self.write_block(self.tmp_dir / "song_data")
        path = self.write_project(one_block_track())

        first, _ = self.run_import(path)
        second, _ = self.run_import(path)

        np.testing.assert_array_equal(
            first.tracks[0].clips[0].samples(), second.tracks[0].clips[0].samples()
        )
        self.assertEqual(first.view, second.view)
        self.assertEqual(first.applied, second.applied)


class TestProjectStructure(ProjectTestCase):
    """Test cases for tracks, clips and metadata."""

    def test_all_track_kinds(self):
        body = (
            '<tags><tag name="artist" value="Someone"/><tag name="id3v2" value="1"/></tags>'
            '<labeltrack name="Labels" numlabels="1">'
            '<label t="1.0" t1="2.0" title="Chorus"/>'
            '</labeltrack>'
            '<notetrack name="Notes" offset="0.5" visiblechannels="65535" velocity="0.0"/>'
            '<timetrack name="Time Track" rangelower="0.9" rangeupper="1.1">'
            '<envelope numpoints="2">'
            '<controlpoint t="2.0" val="1.1"/>'
            '<controlpoint t="0.0" val="0.9"/>'
            '</envelope>'
            '</timetrack>'
            '<wavetrack name="Silence" rate="22050">'
            '<waveclip offset="0.0">'
            + sequence([(0, '<silentblockfile len="2048"/>')], numsamples=2048)
            + '<envelope numpoints="0"/>'
            '</waveclip>'
            '</wavetrack>'
        )
        path = self.write_project(body)

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.SUCCESS)
        kinds = [type(t) for t in project.tracks]
        self.assertEqual(kinds, [LabelTrack, NoteTrack, TimeTrack, WaveTrack])
        self.assertEqual(project.tracks[0].labels[0].title, "Chorus")
        self.assertEqual(project.tracks[1].offset, 0.5)
        self.assertEqual([p.t for p in project.tracks[2].envelope.points], [0.0, 2.0])
        self.assertEqual(project.tracks[3].rate, 22050.0)
        self.assertEqual(project.tracks[3].total_samples(), 2048)
        self.assertEqual(project.tags.to_dict(), {"ARTIST": "Someone"})

    def test_legacy_tag_attributes(self):
        path = self.write_project('<tags title="Song" track="3" id3v2="1" year=""/>')

        project, _ = self.run_import(path)

        self.assertEqual(project.tags.to_dict(), {"TITLE": "Song", "TRACKNUMBER": "3"})

    def test_bad_metadata_keeps_collected_pair(self):
        path = self.write_project(
            '<tags><tag name="artist" value="Someone" comment="bad&#127;"/></tags>'
        )

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.SUCCESS)
        self.assertEqual(project.tags.to_dict(), {"ARTIST": "Someone"})
        self.assertEqual(project.reports, [
            (Severity.WARNING, "Ignoring invalid metadata tag 'comment'")
        ])

    def test_cut_lines(self):
        body = (
            '<wavetrack name="Cuts">'
            '<waveclip offset="0.0">'
            + sequence([(0, '<silentblockfile len="1024"/>')], numsamples=1024)
            + '<envelope numpoints="0"/>'
            '<waveclip offset="0.01">'
            + sequence([(0, '<silentblockfile len="512"/>')], numsamples=512)
            + '<envelope numpoints="0"/>'
            '</waveclip>'
            '</waveclip>'
            '</wavetrack>'
        )
        path = self.write_project(body)

        project, _ = self.run_import(path)

        clip = project.tracks[0].clips[0]
        self.assertEqual(clip.num_samples, 1024)
        self.assertEqual(len(clip.cut_lines), 1)
        self.assertEqual(clip.cut_lines[0].num_samples, 512)
        self.assertEqual(clip.cut_lines[0].depth, 1)

    def test_blocks_without_clip_use_implied_clip(self):
        body = (
            '<wavetrack name="Old">'
            + sequence([(0, '<silentblockfile len="4096"/>')], numsamples=4096)
            + '</wavetrack>'
        )
        path = self.write_project(body)

        project, _ = self.run_import(path)

        self.assertEqual(len(project.tracks[0].clips), 1)
        self.assertEqual(project.tracks[0].total_samples(), 4096)

    def write_alias_source(self, source):
        source.parent.mkdir(parents=True, exist_ok=True)
        stereo = np.stack([self.samples, -self.samples], axis=1)
        sf.write(str(source), stereo, 44100, subtype="FLOAT")

    def import_alias(self, aliasfile, aliaslen=1000):
        block = (
            f'<pcmaliasblockfile summaryfile="e0000002.auf" aliasfile="{aliasfile}" '
            f'aliasstart="100" aliaslen="{aliaslen}" aliaschannel="1" min="0" max="0" rms="0"/>'
        )
        body = (
            '<wavetrack name="Alias"><waveclip offset="0">'
            + sequence([(0, block)], numsamples=aliaslen)
            + '</waveclip></wavetrack>'
        )
        return self.run_import(self.write_project(body))

    def test_alias_absolute_path(self):
        source = self.tmp_dir / "original.wav"
        self.write_alias_source(source)

        project, _ = self.import_alias(source)

        np.testing.assert_array_equal(
            project.tracks[0].clips[0].samples(), -self.samples[100:1100]
        )
        self.assertEqual(project.reports, [])

    def test_alias_in_data_folder(self):
        self.write_alias_source(self.tmp_dir / "song_data" / "take.wav")

        project, _ = self.import_alias("take.wav")

        np.testing.assert_array_equal(
            project.tracks[0].clips[0].samples(), -self.samples[100:1100]
        )
        self.assertEqual(project.reports, [])

    def test_alias_relative_to_project_file(self):
        self.write_alias_source(self.tmp_dir / "sources" / "rel.wav")

        project, _ = self.import_alias("sources/rel.wav")

        np.testing.assert_array_equal(
            project.tracks[0].clips[0].samples(), -self.samples[100:1100]
        )
        self.assertEqual(project.reports, [])

    def test_missing_alias_inserts_silence(self):
        missing = self.tmp_dir / "nowhere" / "x.wav"

        project, summary = self.import_alias(missing, aliaslen=777)

        self.assertIs(summary.result, ProgressResult.SUCCESS)
        clip = project.tracks[0].clips[0]
        self.assertEqual(clip.num_samples, 777)
        self.assertFalse(clip.samples().any())
        self.assertEqual(project.reports, [(
            Severity.WARNING,
            f"Missing alias file {missing}\n\nInserting silence instead."
        )])

    def test_second_time_track_bypassed(self):
        time_track = (
            '<timetrack name="Time Track">'
            '<envelope numpoints="1"><controlpoint t="0.0" val="1.0"/></envelope>'
            '</timetrack>'
        )
        path = self.write_project(time_track + time_track)

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.SUCCESS)
        self.assertEqual(len(project.tracks), 1)
        self.assertIn((Severity.WARNING, TIME_TRACK_BYPASS_MESSAGE), project.reports)

    def test_host_time_track_bypasses_import(self):
        project = InMemoryProject()
        project.tracks.append(TimeTrack())
        path = self.write_project(
            '<timetrack name="Time Track"><envelope numpoints="0"/></timetrack>'
        )

        project, _ = self.run_import(path, project)

        self.assertEqual(sum(isinstance(t, TimeTrack) for t in project.tracks), 1)
        self.assertEqual(project.reports, [(Severity.WARNING, TIME_TRACK_BYPASS_MESSAGE)])


class TestRootAttributes(ProjectTestCase):
    """Test cases for the root tag and the view settings it carries."""

    def test_attributes_applied_in_fixed_order(self):
        # Document order deliberately differs from the commit order
        root = (
            'selHigh="2000" selLow="100" sel1="2.5" sel0="1.5" zoom="50" h="0.25" vpos="3" '
            'bandwidthformat="octaves" frequencyformat="Hz" audiotimeformat="seconds" '
            'selectionformat="samples" snapto="on" rate="48000" '
            'projname="song_data" audacityversion="2.0.0" version="1.3.0"'
        )
        path = self.write_project("", root=root)

        project, _ = self.run_import(path)

        self.assertEqual(project.applied, [
            "rate", "snap_to", "selection_format", "audio_time_format",
            "frequency_format", "bandwidth_format", "vpos", "h", "zoom",
            "sel0", "sel1", "sel_low", "sel_high",
        ])
        self.assertEqual(project.view.rate, 48000.0)
        self.assertTrue(project.view.snap_to)
        self.assertEqual(project.view.selection_format, "samples")
        self.assertEqual(project.view.vpos, 3)
        self.assertEqual(project.view.sel_high, 2000.0)

    def test_track_rate_follows_project_rate(self):
        root = DEFAULT_ROOT.format(projname="song_data").replace('rate="44100.0"', 'rate="8000"')
        path = self.write_project('<wavetrack name="A"/>', root=root)

        project, _ = self.run_import(path)

        self.assertEqual(project.tracks[0].rate, 8000.0)

    def test_dirty_host_keeps_view(self):
        project = InMemoryProject(dirty=True)
        path = self.write_project('<wavetrack name="A"/>')

        project, summary = self.run_import(path, project)

        self.assertIs(summary.result, ProgressResult.SUCCESS)
        self.assertEqual(len(project.tracks), 1)
        self.assertEqual(project.applied, [])
        self.assertEqual(project.view.sel1, 0.0)

    def test_second_import_into_same_project(self):
        path = self.write_project('<wavetrack name="A"/>')
        project, _ = self.run_import(path)
        applied = list(project.applied)

        self.run_import(path, project)

        self.assertEqual(len(project.tracks), 2)
        self.assertEqual(project.applied, applied)

    def test_two_of_three_required_attributes(self):
        path = self.write_project('<wavetrack name="A"/>', root='version="1.3.0" audacityversion="2.4.2"')

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.FAILED)
        self.assertEqual(project.tracks, [])
        self.assertEqual(project.reports[0][0], Severity.ERROR)

    def test_invalid_root_value(self):
        root = DEFAULT_ROOT.format(projname="song_data").replace('zoom="86.1328125"', 'zoom="wide"')
        path = self.write_project("", root=root)

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.FAILED)
        self.assertEqual(summary.message, "Invalid project 'zoom' attribute.")
        self.assertEqual(project.applied, [])

    def test_data_folder_fallback(self):
        (self.tmp_dir / "song-data").mkdir()
        self.write_block(self.tmp_dir / "song-data")
        path = self.write_project(one_block_track(), projname="renamed_data", data_dir=False)

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.SUCCESS)
        np.testing.assert_array_equal(project.tracks[0].clips[0].samples(), self.samples)

    def test_missing_data_folder(self):
        path = self.write_project(one_block_track(), projname="gone_data", data_dir=False)

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.FAILED)
        self.assertEqual(project.reports, [
            (Severity.ERROR, "Couldn't find the project data folder: \"gone_data\"")
        ])

    def test_project_name_outside_project_folder_ignored(self):
        outside = self.tmp_dir / "outside"
        self.write_block(outside)
        (self.tmp_dir / "song-data").mkdir()
        path = self.write_project(one_block_track(), projname=str(outside), data_dir=False)

        project, summary = self.run_import(path)

        # The fallback folder is used and nothing outside it is indexed
        self.assertIs(summary.result, ProgressResult.SUCCESS)
        self.assertFalse(project.tracks[0].clips[0].samples().any())
        self.assertEqual(project.reports, [(
            Severity.WARNING,
            "Missing project file e0000001.au\n\nInserting silence instead."
        )])

    def test_parent_folder_project_name_rejected(self):
        self.write_block(self.tmp_dir)
        path = self.write_project(one_block_track(), projname="..", data_dir=False)

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.FAILED)
        self.assertEqual(project.reports, [
            (Severity.ERROR, "Couldn't find the project data folder: \"..\"")
        ])


class TestSequenceBounds(ProjectTestCase):
    """Test cases for maxsamples validation."""

    def import_with_maxsamples(self, value):
        path = self.write_project(
            '<wavetrack name="A"><waveclip offset="0">'
            + sequence([(0, '<silentblockfile len="1024"/>')], maxsamples=value, numsamples=1024)
            + '</waveclip></wavetrack>'
        )
        return self.run_import(path)

    def test_bounds(self):
        for value, expected in (("1023", ProgressResult.FAILED),
                                ("1024", ProgressResult.SUCCESS),
                                ("67108864", ProgressResult.SUCCESS),
                                ("67108865", ProgressResult.FAILED)):
            with self.subTest(maxsamples=value):
                project, summary = self.import_with_maxsamples(value)
                self.assertIs(summary.result, expected)
                if expected is ProgressResult.FAILED:
                    self.assertEqual(summary.message, "Invalid sequence 'maxsamples' attribute.")
                    self.assertEqual(project.tracks, [])

    def test_invalid_sample_format(self):
        path = self.write_project(
            '<wavetrack name="A"><waveclip offset="0">'
            + sequence([], sampleformat="12345")
            + '</waveclip></wavetrack>'
        )
        _, summary = self.run_import(path)
        self.assertIs(summary.result, ProgressResult.FAILED)
        self.assertEqual(summary.message, "Invalid sequence 'sampleformat' attribute.")


class TestFailuresAndCancellation(ProjectTestCase):
    """Test cases where nothing may reach the host project."""

    def test_unknown_tag(self):
        path = self.write_project('<tags><tag name="a" value="b"/></tags><mixerboard/>')

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.FAILED)
        self.assertEqual(len(project.tags), 0)
        self.assertEqual(project.reports, [
            (Severity.ERROR, "Internal error in importer...tag not recognized: <mixerboard>")
        ])

    def test_corrupt_document(self):
        path = self.tmp_dir / "broken.aup"
        (self.tmp_dir / "song_data").mkdir()
        path.write_text(
            '<?xml version="1.0"?>\n'
            '<project projname="song_data" version="1.3.0" audacityversion="2.4.2">'
            '<wavetrack name="A">',
            encoding='utf-8'
        )

        project, summary = self.run_import(path)

        self.assertIs(summary.result, ProgressResult.FAILED)
        self.assertEqual(project.tracks, [])
        self.assertTrue(project.reports[0][1].startswith("Couldn't import the project:"))

    def test_cancel_before_first_block(self):
        self.write_block(self.tmp_dir / "song_data")
        path = self.write_project('<tags title="x"/>' + one_block_track())
        progress = TqdmProgress(desc="test")
        progress.cancel()

        project, summary = self.run_import(path, progress=progress)

        self.assertIs(summary.result, ProgressResult.CANCELLED)
        self.assertEqual(project.tracks, [])
        self.assertEqual(len(project.tags), 0)
        self.assertEqual(project.reports, [])
        self.assertEqual(project.applied, [])

    def test_stop_between_blocks(self):
        blocks = [(i * 1024, '<silentblockfile len="1024"/>') for i in range(4)]
        path = self.write_project(
            '<wavetrack name="A"><waveclip offset="0">'
            + sequence(blocks, numsamples=4096)
            + '</waveclip></wavetrack>'
        )
        progress = CancellingProgress(after=2, result=ProgressResult.STOPPED)

        project, summary = self.run_import(path, progress=progress)

        self.assertIs(summary.result, ProgressResult.STOPPED)
        self.assertEqual(progress.updates, 3)
        self.assertTrue(progress.closed)
        self.assertEqual(project.tracks, [])

    def test_progress_reaches_total(self):
        blocks = [(i * 1024, '<silentblockfile len="1024"/>') for i in range(3)]
        path = self.write_project(
            '<wavetrack name="A"><waveclip offset="0">'
            + sequence(blocks, numsamples=3072)
            + '</waveclip></wavetrack>'
        )
        progress = CancellingProgress(after=100)

        _, summary = self.run_import(path, progress=progress)

        self.assertIs(summary.result, ProgressResult.SUCCESS)
        self.assertEqual(progress.calls, [(0, 3072), (1024, 3072), (2048, 3072), (3072, 3072)])
        self.assertTrue(progress.closed)


class TestPlugin(ProjectTestCase):
    """Test cases for format recognition."""

    def test_description(self):
        plugin = AUPImportPlugin()
        self.assertEqual(plugin.plugin_id, "legacyaup")
        self.assertEqual(plugin.extensions, ("aup",))
        self.assertEqual(plugin.get_format_description(), "AUP project files (*.aup)")

    def test_pre_1_0_project(self):
        path = self.tmp_dir / "ancient.aup"
        path.write_bytes(b"AudacityProject\nVersion\n0.95\n")
        project = InMemoryProject()

        self.assertIsNone(AUPImportPlugin().open(path, project))
        self.assertEqual(project.reports, [(Severity.ERROR, PRE_1_0_MESSAGE)])

    def test_not_a_project(self):
        path = self.tmp_dir / "notes.aup"
        path.write_text("just some text", encoding='utf-8')
        project = InMemoryProject()

        self.assertIsNone(AUPImportPlugin().open(path, project))
        self.assertEqual(project.reports, [])

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            AUPImporter(self.tmp_dir / "missing.aup", InMemoryProject())

    def test_host_queries(self):
        path = self.write_project("")
        importer = AUPImporter(path, InMemoryProject(), ImporterConfig())
        self.assertEqual(importer.get_file_description(), "AUP project files (*.aup)")
        self.assertEqual(importer.get_file_uncompressed_bytes(), 0)
        self.assertEqual(importer.get_stream_count(), 1)
        self.assertEqual(importer.get_stream_info(), [])


if __name__ == '__main__':
    unittest.main()
