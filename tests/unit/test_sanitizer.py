from feed_syndication.services.sanitizer import AllowListSanitizer


class TestAllowListSanitizer:
    def setup_method(self):
        self.sanitizer = AllowListSanitizer()

    def test_script_removed_with_content(self):
        html = '<p onclick="x()">Hi<script>bad()</script></p>'
        assert self.sanitizer.sanitize(html) == "<p>Hi</p>"

    def test_embedded_content_removed(self):
        html = '<iframe src="https://player.example.com/1"></iframe><p>ok</p><video src="a.mp4"></video>'
        assert self.sanitizer.sanitize(html) == "<p>ok</p>"

    def test_disallowed_tags_unwrapped(self):
        assert self.sanitizer.sanitize('<font color="red">Hello</font> world') == "Hello world"
        assert self.sanitizer.sanitize("<table><tr><td>cell</td></tr></table>") == "cell"

    def test_attributes_filtered(self):
        html = '<div class="box" id="x" style="color:red">t</div>'
        assert self.sanitizer.sanitize(html) == '<div class="box">t</div>'

    def test_link_attributes(self):
        html = '<a href="https://example.com" title="t" onclick="x()" class="btn">x</a>'
        assert self.sanitizer.sanitize(html) == '<a href="https://example.com" title="t">x</a>'

    def test_unsafe_href_dropped(self):
        html = '<a href=" javascript:alert(1)" title="t">x</a>'
        assert self.sanitizer.sanitize(html) == '<a title="t">x</a>'

    def test_comments_removed(self):
        assert self.sanitizer.sanitize("<p>a<!-- note -->b</p>") == "<p>ab</p>"

    def test_image_attributes(self):
        html = '<img src="https://cdn.example.com/a.jpg" alt="A" width="10" class="pp-media__image"/>'
        clean = self.sanitizer.sanitize(html)

        assert 'src="https://cdn.example.com/a.jpg"' in clean
        assert 'alt="A"' in clean
        assert 'class="pp-media__image"' in clean
        assert "width" not in clean

    def test_empty_input(self):
        assert self.sanitizer.sanitize("") == ""

    def test_idempotent(self):
        html = (
            '<section class="pp-article__boxout"><div id="boxout_1" class="pp-boxout" '
            'style="background-color:#606060;"><div class="pp-boxout__body"><h4>Quote</h4>'
            "<p>Author</p></div></div></section>"
            '<p>Text<br><span style="x">span</span><font>font</font></p>'
            '<ul><li><a href="https://example.com" target="_blank">link</a></li></ul>'
            "<script>alert(1)</script><!-- c -->"
        )
        once = self.sanitizer.sanitize(html)
        assert self.sanitizer.sanitize(once) == once
        assert "boxout_1" not in once
        assert "<script" not in once

    def test_custom_allowlist(self):
        html = "<p><em>x</em></p>"
        assert self.sanitizer.sanitize(html, allowlist={"em": set()}) == "<em>x</em>"
