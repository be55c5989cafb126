"""Keyword table for advisory profile-field hints (English and Chinese labels)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FieldPattern:
    """Keywords that point at one canonical profile field."""

    profile_field: str
    keywords: tuple[str, ...]
    confidence: float
    input_type: str | None = None


FIELD_PATTERNS: tuple[FieldPattern, ...] = (
    FieldPattern("fullName", ("full name", "fullname", "姓名", "全名"), 0.95),
    FieldPattern("given_name", ("first name", "given name", "firstname", "givenname", "名字"), 0.9),
    FieldPattern("family_name", ("last name", "family name", "surname", "lastname", "familyname", "姓氏"), 0.9),
    FieldPattern("email", ("email", "e-mail", "email address", "邮箱", "電子郵件"), 0.95, "email"),
    FieldPattern("phone", ("phone", "mobile", "telephone", "tel", "电话", "電話", "手机", "手機"), 0.85, "tel"),
    FieldPattern("address", ("address", "地址", "住址"), 0.8),
    FieldPattern("city", ("city", "城市"), 0.75),
    FieldPattern("country", ("country", "country of residence", "国家", "國家"), 0.8),
    FieldPattern("dob", ("date of birth", "dob", "birthday", "birth date", "出生日期", "生日", "出生年月"), 0.85, "date"),
    FieldPattern("nationality", ("nationality", "国籍", "國籍"), 0.8),
    FieldPattern("gender", ("gender", "sex", "性别", "性別"), 0.7),
    FieldPattern("id_number", ("id number", "id card", "passport", "身份证", "身份證"), 0.75),
    FieldPattern("school_name", ("school name", "school", "high school", "university", "学校", "學校"), 0.75),
    FieldPattern("degree", ("degree", "qualification", "学位", "學位"), 0.7),
    FieldPattern("major", ("major", "subject", "专业", "專業"), 0.7),
    FieldPattern("gpa", ("gpa", "grade point average", "成绩", "成績"), 0.7),
    FieldPattern("personal_statement", ("personal statement", "personal essay", "个人陈述", "個人陳述"), 0.8),
    FieldPattern("statement_of_purpose", ("statement of purpose", "sop", "目的陈述", "目的陳述"), 0.8),
    FieldPattern("motivation_letter", ("motivation letter", "motivation", "动机信", "動機信"), 0.75),
    FieldPattern("essay", ("essay", "短文", "文章"), 0.6),
    FieldPattern("resume", ("resume", "cv", "curriculum vitae", "简历", "履歷"), 0.7),
    FieldPattern("recommendation", ("recommendation", "reference", "推荐信", "推薦信"), 0.7),
)
