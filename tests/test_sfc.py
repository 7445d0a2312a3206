"""Tests for single-file component splitting and template compilation."""

import pytest

from zhpick.errors import TransformError
from zhpick.extractor import extract_strings
from zhpick.sfc import SfcBlock, compile_template, parse_sfc

COMPONENT = """<template>
  <div :title="'标题' + count" class="box">
    <template v-if="ready">
      <input placeholder="请输入" />
    </template>
    <span>你好 {{ name }}</span>
    <button @click="notify('已保存')">保存</button>
  </div>
</template>

<script lang="ts">
export default { name: "Demo" };
</script>

<script setup>
const label = "设置";
</script>

<style scoped>
.box { content: "样式"; }
</style>
"""


class TestParseSfc:
    def test_blocks_are_found(self):
        descriptor = parse_sfc(COMPONENT)
        assert descriptor.script is not None
        assert descriptor.script_setup is not None
        assert descriptor.template is not None

    def test_script_block_content_and_lang(self):
        descriptor = parse_sfc(COMPONENT)
        assert descriptor.script.lang == "ts"
        assert descriptor.script.content.strip() == 'export default { name: "Demo" };'
        assert not descriptor.script.setup

    def test_setup_block(self):
        descriptor = parse_sfc(COMPONENT)
        assert descriptor.script_setup.setup
        assert descriptor.script_setup.lang is None
        assert descriptor.script_setup.content.strip() == 'const label = "设置";'

    def test_nested_templates_stay_in_outer_block(self):
        descriptor = parse_sfc(COMPONENT)
        content = descriptor.template.content
        assert '<template v-if="ready">' in content
        assert content.rstrip().endswith("</div>")

    def test_missing_blocks(self):
        descriptor = parse_sfc("<script>\nconst a = 1;\n</script>\n")
        assert descriptor.template is None
        assert descriptor.script_setup is None
        assert descriptor.script.content == "\nconst a = 1;\n"


class TestCompileTemplate:
    def test_text_interpolation_becomes_concatenation(self):
        code = compile_template(SfcBlock(tag="template", content="<p>你好 {{ name }}</p>"))
        assert '_createTextVNode("你好 " + _toDisplayString(name));' in code

    def test_compiled_template_is_extractable(self):
        descriptor = parse_sfc(COMPONENT)
        code = compile_template(descriptor.template)
        assert extract_strings(code, "typescript") == [
            "标题",
            "请输入",
            "你好",
            "已保存",
            "保存",
        ]

    def test_v_for_source_is_kept(self):
        block = SfcBlock(
            tag="template",
            content="<li v-for=\"(item, i) in ['甲', '乙']\">{{ item }}</li>",
        )
        assert extract_strings(compile_template(block), "typescript") == ["甲", "乙"]

    def test_slot_props_are_ignored(self):
        block = SfcBlock(tag="template", content='<comp #default="{ row }">行</comp>')
        code = compile_template(block)
        assert "row" not in code
        assert extract_strings(code, "typescript") == ["行"]

    def test_entities_are_decoded(self):
        block = SfcBlock(tag="template", content="<p>确定&nbsp;&amp;&nbsp;取消</p>")
        assert extract_strings(compile_template(block), "typescript") == [
            "确定\xa0&\xa0取消"
        ]

    def test_non_breaking_spaces_are_not_condensed(self):
        block = SfcBlock(tag="template", content="<p>\n  保存&nbsp;&nbsp;\n  草稿</p>")
        assert extract_strings(compile_template(block), "typescript") == [
            "保存\xa0\xa0 草稿"
        ]

    def test_entity_only_text_is_kept(self):
        code = compile_template(SfcBlock(tag="template", content="<p>&nbsp;</p>"))
        assert "_createTextVNode" in code

    def test_unsupported_language(self):
        block = SfcBlock(tag="template", content="p 你好", attrs={"lang": "pug"})
        with pytest.raises(TransformError):
            compile_template(block)
