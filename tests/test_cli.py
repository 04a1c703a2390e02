class TestHomepageCheck:
    def test_reports_visible_and_hidden_sections(self, app, make_section):
        make_section(name="Hero", type="heroSlider", ordering=0)
        make_section(name="Draft ticker", type="scrollingText", ordering=1, is_published=False)

        result = app.test_cli_runner().invoke(args=["homepage", "check"])

        assert result.exit_code == 0
        assert "Total sections: 2" in result.output
        assert "Visible on homepage: 1" in result.output
        assert "Draft ticker (scrollingText): unpublished" in result.output
