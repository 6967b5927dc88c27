"""
LLM 出力の JSON 修復ユーティリティ

コードフェンスや前置きの説明文が混ざった応答から JSON 部分だけを取り出し、
snake_case のキーを camelCase に揃える。
"""

import json
import re
from typing import Any

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_SNAKE_RE = re.compile(r"_([a-z])")


def _cut_at_matching_close(text: str, open_char: str, close_char: str) -> str:
    """先頭の括弧に対応する閉じ括弧までを切り出す（文字列リテラル内は無視）"""
    depth = 0
    in_string = False
    escape = False
    for i, char in enumerate(text):
        if escape:
            escape = False
            continue
        if char == "\\":
            escape = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char == open_char:
            depth += 1
        elif char == close_char:
            depth -= 1
            if depth == 0:
                return text[: i + 1]
    return text


def extract_json(response: str) -> str:
    """応答テキストから JSON 文字列を抽出

    Args:
        response: LLM の生の応答

    Returns:
        JSON として解析を試みるべき文字列
    """
    json_string = response.strip()

    # マークダウンのコードブロックを除去
    fence = _CODE_FENCE_RE.search(json_string)
    if fence:
        json_string = fence.group(1).strip()

    # 前置きの説明文をスキップ
    starts = [pos for pos in (json_string.find("{"), json_string.find("[")) if pos != -1]
    if starts:
        json_string = json_string[min(starts) :]

    if json_string.startswith("{"):
        json_string = _cut_at_matching_close(json_string, "{", "}")
    elif json_string.startswith("["):
        json_string = _cut_at_matching_close(json_string, "[", "]")

    return json_string.strip()


def snake_to_camel(key: str) -> str:
    """snake_case を camelCase に変換"""
    return _SNAKE_RE.sub(lambda m: m.group(1).upper(), key)


def convert_keys_to_camel_case(obj: Any) -> Any:
    """dict のキーを再帰的に camelCase へ変換"""
    if isinstance(obj, list):
        return [convert_keys_to_camel_case(item) for item in obj]
    if isinstance(obj, dict):
        return {snake_to_camel(str(k)): convert_keys_to_camel_case(v) for k, v in obj.items()}
    return obj


def parse_model_json(response: str) -> Any:
    """LLM 応答を修復して Python オブジェクトに変換

    Raises:
        json.JSONDecodeError: 修復後も JSON として解析できない場合
    """
    return convert_keys_to_camel_case(json.loads(extract_json(response)))
