"""Tests for pagetype.services.video_scanner."""

from pagetype.models.media import UNKNOWN_AREA
from pagetype.services.video_scanner import scan_videos


class TestVideoTag:
    def test_element_src(self):
        html = '<video src="/media/clip.mp4" width="640" height="360"></video>'
        videos = scan_videos(html)
        assert len(videos) == 1
        assert videos[0].src == "/media/clip.mp4"
        assert (videos[0].width, videos[0].height, videos[0].area) == (640, 360, 640 * 360)

    def test_source_child(self):
        html = (
            '<video controls width="320" height="240">\n'
            '  <source src="/media/clip.webm" type="video/webm">\n'
            "</video>"
        )
        videos = scan_videos(html)
        assert [v.src for v in videos] == ["/media/clip.webm"]
        assert videos[0].width == 320

    def test_element_src_wins_over_source(self):
        html = '<video src="/a.mp4"><source src="/b.mp4"></video>'
        assert [v.src for v in scan_videos(html)] == ["/a.mp4"]

    def test_data_src_is_not_src(self):
        html = '<video data-src="/lazy.mp4"><source src="/real.mp4"></video>'
        assert [v.src for v in scan_videos(html)] == ["/real.mp4"]

    def test_video_without_any_source_is_skipped(self):
        assert scan_videos("<video controls></video>") == []

    def test_sources_do_not_leak_into_next_video(self):
        html = "<video></video><p>text</p><video><source src='/second.mp4'></video>"
        assert [v.src for v in scan_videos(html)] == ["/second.mp4"]


class TestIframeAndEmbed:
    def test_iframe(self):
        html = '<iframe src="https://youtube.com/embed/x" width="640" height="360"></iframe>'
        videos = scan_videos(html)
        assert len(videos) == 1
        assert videos[0].src == "https://youtube.com/embed/x"
        assert videos[0].has_dimensions

    def test_iframe_without_dimensions(self):
        videos = scan_videos('<iframe src="https://player.example/1"></iframe>')
        assert videos[0].area == UNKNOWN_AREA
        assert not videos[0].has_dimensions

    def test_percent_width_is_unknown(self):
        videos = scan_videos('<iframe src="/p" width="100%" height="400"></iframe>')
        assert videos[0].width is None
        assert not videos[0].has_dimensions

    def test_object_data(self):
        html = '<object data="/flash/player.swf" width="400" height="300"></object>'
        assert [v.src for v in scan_videos(html)] == ["/flash/player.swf"]

    def test_embed_src(self):
        html = "<EMBED SRC='/movie.swf' WIDTH='10' HEIGHT='10'>"
        videos = scan_videos(html)
        assert [v.src for v in videos] == ["/movie.swf"]
        assert videos[0].area == 100


class TestScanOrder:
    def test_order_and_no_dedup(self):
        html = (
            '<iframe src="/i"></iframe>'
            '<embed src="/e">'
            '<video src="/v"></video>'
            '<iframe src="/i"></iframe>'
        )
        assert [v.src for v in scan_videos(html)] == ["/v", "/i", "/i", "/e"]

    def test_no_match(self):
        assert scan_videos("<p>No media here</p>") == []

    def test_empty_html(self):
        assert scan_videos("") == []

    def test_anchor_links_are_not_players(self):
        assert scan_videos('<a href="/video/1">Watch</a>') == []
