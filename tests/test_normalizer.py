import re

from f1gpt.indexing.normalizer import clean_text, normalize


def test_removes_site_chrome_and_scripts():
    html = """
    <html><head><style>body { color: red; }</style></head>
    <body>
      <header>Site header</header>
      <nav><a href="/">Home</a></nav>
      <main>
        <h1>Monaco Grand Prix</h1>
        <script>var tracking = 1;</script>
        <p>The race is held on the streets of Monte Carlo.</p>
      </main>
      <aside>Related stories</aside>
      <footer>Copyright</footer>
    </body></html>
    """
    assert normalize(html) == "Monaco Grand Prix The race is held on the streets of Monte Carlo."


def test_main_region_wins_over_later_selectors():
    html = "<body><article>Article body</article><main>Main body</main></body>"
    assert normalize(html) == "Main body"


def test_skips_empty_matches():
    html = "<body><main>   </main><article>Story text</article></body>"
    assert normalize(html) == "Story text"


def test_wikipedia_content_container():
    html = """
    <body>
      <div id="mw-content-text"><div class="mw-parser-output">
        <h2>History<span class="mw-editsection">[edit]</span></h2>
        <p>The first World Championship race was held in 1950.[1]</p>
      </div></div>
      <div class="navbox">Formula One navigation</div>
    </body>
    """
    assert normalize(html) == "History The first World Championship race was held in 1950."


def test_falls_back_to_body_text():
    html = "<html><body><nav>Menu</nav><div><p>Hello</p> <p>World</p></div><footer>Foot</footer></body></html>"
    assert normalize(html) == "Hello World"


def test_output_has_no_tags_or_whitespace_runs():
    html = "<main><p>Bold: &lt;b&gt;fast&lt;/b&gt;</p>\n\n<p>Lap   time\t1:12.909 [edit]</p></main>"
    text = normalize(html)

    assert text == "Bold: fast Lap time 1:12.909"
    assert not re.search(r"<[^>]*>", text)
    assert not re.search(r"\s{2,}", text)


def test_clean_text_strips_editorial_markers():
    assert clean_text("  Senna [citation needed] won [ edit ] in 1988[12].  ") == "Senna won in 1988 ."


def test_angle_brackets_in_prose_are_kept():
    html = "<main><p>Lap delta &lt; 0.1s and tyre temp &gt; 100C</p></main>"

    assert normalize(html) == "Lap delta < 0.1s and tyre temp > 100C"
    assert clean_text("a < b and c > d") == "a < b and c > d"
