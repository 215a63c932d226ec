"""Prompt construction for period summaries, commit messages and change summaries."""

from typing import Sequence, Tuple

from langchain_core.prompts import PromptTemplate

from worklog.models.commit import CommitRecord

SUMMARY_FILE_LIMIT = 5
COMMIT_MESSAGE_DIFF_LIMIT = 8000
CHANGE_SUMMARY_DIFF_LIMIT = 12000
TRUNCATION_MARKER = "\n\n... (diff truncated)"

COMMIT_TYPES = ("feature", "fix", "docs", "style", "refactor", "test", "chore")

REPORT_NAMES = {
    "zh-CN": {"daily": "日报", "weekly": "周报", "custom": "工作报告"},
    "en": {"daily": "daily report", "weekly": "weekly report", "custom": "work report"},
}

PERIOD_NAMES = {
    "zh-CN": {"daily": "日", "weekly": "周期", "custom": "周期"},
    "en": {"daily": "day", "weekly": "period", "custom": "period"},
}

PERIOD_SUMMARY_TEMPLATE_ZH = """你是一个专业的技术文档撰写助手。请根据以下Git/SVN提交记录，生成一份结构化的工作{report_name}。

## 提交记录
{commit_list}

## 要求
1. 用中文撰写
2. 按功能模块或工作类型分类总结
3. 突出重点工作成果
4. 语言简洁专业
5. 使用Markdown格式

## 输出格式
### 工作概述
（一句话总结本{period_name}主要工作）

### 完成事项
（按类别列出完成的工作）

### 技术细节
（如有重要的技术实现，简要说明）

### 下一步计划
（可选，如果能从提交记录推断）

请直接输出报告内容，不要有额外的解释。"""

PERIOD_SUMMARY_TEMPLATE_EN = """You are a professional technical documentation assistant. Please generate a structured {report_name} based on the following Git/SVN commit records.

## Commit Records
{commit_list}

## Requirements
1. Write in English
2. Categorize by feature modules or work types
3. Highlight key achievements
4. Use concise and professional language
5. Use Markdown format

## Output Format
### Overview
(One sentence summary of the main work of this {period_name})

### Completed Tasks
(List completed work by category)

### Technical Details
(Brief explanation of important technical implementations, if any)

### Next Steps
(Optional, if inferable from commit records)

Please output the report content directly without additional explanations."""

COMMIT_MESSAGE_TEMPLATE_ZH = """你是一个经验丰富的软件工程师。请根据以下代码变更（diff），生成一条规范的 Git 提交信息。

## 代码变更
```diff
{diff}
```

## 要求
1. 第一行格式为 `type: 简短描述`，不超过50个字符
2. type 只能是以下之一：{commit_types}
3. 如有必要，第一行之后空一行，再用简短的要点说明变更细节
4. 用中文撰写描述

请只输出提交信息本身，不要使用代码块，不要有额外的解释。"""

COMMIT_MESSAGE_TEMPLATE_EN = """You are an experienced software engineer. Write a conventional Git commit message for the following code changes (diff).

## Code Changes
```diff
{diff}
```

## Requirements
1. The first line must be `type: short description`, at most 50 characters
2. type must be one of: {commit_types}
3. If needed, add a blank line after the first line, followed by brief bullet points describing the details
4. Write in English

Output only the commit message itself, without code fences or additional explanations."""

CHANGE_SUMMARY_TEMPLATE_ZH = """你是一个资深的代码审查专家。请根据以下提交记录和代码变更，生成一份代码变更摘要。

## 提交记录
{commit_list}

## 代码变更
```diff
{diff}
```

## 输出格式
### 变更概述
（一两句话总结本次变更的目的）

### 主要变更
（按模块列出关键改动）

### 技术细节
（重要的实现细节、接口或数据结构变化）

### 潜在风险
（可能的兼容性、性能或安全风险；如无，写"未发现明显风险"）

### 改进建议
（代码质量或设计方面的建议；如无，写"暂无建议"）

请使用中文和Markdown格式直接输出摘要内容，不要有额外的解释。"""

CHANGE_SUMMARY_TEMPLATE_EN = """You are a senior code reviewer. Based on the following commits and code changes, write a change summary.

## Commits
{commit_list}

## Code Changes
```diff
{diff}
```

## Output Format
### Overview
(One or two sentences on the purpose of these changes)

### Key Changes
(Key modifications grouped by module)

### Technical Details
(Important implementation details, interface or data structure changes)

### Potential Risks
(Compatibility, performance or security risks; if none, write "None identified")

### Suggestions
(Code quality or design suggestions; if none, write "No suggestions")

Output the summary directly in English using Markdown, without additional explanations."""

TEMPLATES = {
    "period_summary": {"zh-CN": PERIOD_SUMMARY_TEMPLATE_ZH, "en": PERIOD_SUMMARY_TEMPLATE_EN},
    "commit_message": {"zh-CN": COMMIT_MESSAGE_TEMPLATE_ZH, "en": COMMIT_MESSAGE_TEMPLATE_EN},
    "change_summary": {"zh-CN": CHANGE_SUMMARY_TEMPLATE_ZH, "en": CHANGE_SUMMARY_TEMPLATE_EN},
}


def locale_of(language: str) -> str:
    """zh-CN selects the Chinese templates, anything else English."""
    return "zh-CN" if language == "zh-CN" else "en"


def _render(intent: str, language: str, **variables: str) -> str:
    template = TEMPLATES[intent][locale_of(language)]
    return PromptTemplate(template=template, input_variables=list(variables)).format(**variables)


def truncate_diff(diff: str, limit: int) -> str:
    """Keep the first `limit` characters and mark the cut; never truncate silently."""
    if len(diff) <= limit:
        return diff
    return diff[:limit] + TRUNCATION_MARKER


def format_file_list(files: Sequence[str], limit: int, language: str) -> str:
    """Comma-separated file names, capped at `limit` with a remaining-count suffix."""
    shown = ", ".join(files[:limit])
    remaining = len(files) - limit
    if remaining <= 0:
        return shown
    if locale_of(language) == "zh-CN":
        return f"{shown} 等另外 {remaining} 个文件"
    return f"{shown} and {remaining} more"


def format_commit_entry(commit: CommitRecord, language: str) -> str:
    lines = commit.message.split("\n")
    entry = f"- [{commit.id}] {lines[0]}"
    for line in lines[1:]:
        entry += f"\n  {line}" if line.strip() else ""
    if commit.files:
        label = "修改文件" if locale_of(language) == "zh-CN" else "Files"
        entry += f"\n  {label}: {format_file_list(commit.files, SUMMARY_FILE_LIMIT, language)}"
    return entry


def build_period_summary_prompt(commits: Sequence[CommitRecord], kind: str, language: str) -> str:
    """Instruction for a daily, weekly or custom-range work report."""
    locale = locale_of(language)
    return _render(
        "period_summary",
        language,
        report_name=REPORT_NAMES[locale][kind],
        period_name=PERIOD_NAMES[locale][kind],
        commit_list="\n".join(format_commit_entry(commit, language) for commit in commits),
    )


def build_commit_message_prompt(diff: str, language: str) -> str:
    return _render(
        "commit_message",
        language,
        diff=truncate_diff(diff, COMMIT_MESSAGE_DIFF_LIMIT),
        commit_types=", ".join(COMMIT_TYPES),
    )


def build_change_summary_prompt(diff: str, commits: Sequence[Tuple[str, str]], language: str) -> str:
    """Instruction for summarizing a diff spanning the given (id, message) commits."""
    commit_list = "\n".join(f"- [{commit_id}] {message}" for commit_id, message in commits)
    return _render(
        "change_summary",
        language,
        commit_list=commit_list,
        diff=truncate_diff(diff, CHANGE_SUMMARY_DIFF_LIMIT),
    )
