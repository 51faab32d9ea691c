"""Jake Gutierrez resume template.

Reproduces the popular ATS-friendly single-page resume layout from
``github.com/jakegut/resume`` using PyLaTeX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pylatex import Document, NoEscape, Package

from jobpilot.templates.base import ResumeTemplate

if TYPE_CHECKING:
    from jobpilot.models.profile import (
        EducationEntry,
        Profile,
        ProjectEntry,
        SocialLink,
        WorkExperienceEntry,
    )

__all__ = ["JakeResumeTemplate"]

# ---------------------------------------------------------------------------
# LaTeX preamble fragments
# ---------------------------------------------------------------------------

_PACKAGES: list[Package] = [
    Package("latexsym"),
    Package("fullpage", options=NoEscape("empty")),
    Package("titlesec"),
    Package("marvosym"),
    Package("color", options=NoEscape("usenames,dvipsnames")),
    Package("verbatim"),
    Package("enumitem"),
    Package("hyperref", options=NoEscape("hidelinks")),
    Package("fancyhdr"),
    Package("babel", options=NoEscape("english")),
    Package("tabularx"),
]

_PREAMBLE_SETUP = r"""
\pagestyle{fancy}
\fancyhf{}
\fancyfoot{}
\renewcommand{\headrulewidth}{0pt}
\renewcommand{\footrulewidth}{0pt}
\addtolength{\oddsidemargin}{-0.6in}
\addtolength{\evensidemargin}{-0.5in}
\addtolength{\textwidth}{1.19in}
\addtolength{\topmargin}{-.7in}
\addtolength{\textheight}{1.4in}
\urlstyle{same}
\raggedbottom
\raggedright
\setlength{\tabcolsep}{0in}
\titleformat{\section}{
  \vspace{-4pt}\scshape\raggedright\large
}{}{0em}{}[\color{black}\titlerule \vspace{-5pt}]
\pdfgentounicode=1
"""

_CUSTOM_COMMANDS = r"""
\newcommand{\resumeItem}[1]{
  \item\small{
    {#1 \vspace{-2pt}}
  }
}
\newcommand{\resumeSubheading}[4]{
  \vspace{-2pt}\item
    \begin{tabular*}{0.97\textwidth}[t]{l@{\extracolsep{\fill}}r}
      \textbf{#1} & #2 \\
      \textit{\small#3} & \textit{\small #4} \\
    \end{tabular*}\vspace{-7pt}
}
\newcommand{\resumeProjectHeading}[2]{
    \item
    \begin{tabular*}{0.97\textwidth}{l@{\extracolsep{\fill}}r}
      \small#1 & #2 \\
    \end{tabular*}\vspace{-7pt}
}
\renewcommand\labelitemii{$\vcenter{\hbox{\tiny$\bullet$}}$}
\newcommand{\resumeSubHeadingListStart}{\begin{itemize}[leftmargin=0.15in, label={}]}
\newcommand{\resumeSubHeadingListEnd}{\end{itemize}}
\newcommand{\resumeItemListStart}{\begin{itemize}}
\newcommand{\resumeItemListEnd}{\end{itemize}\vspace{-5pt}}
"""

_SEPARATOR = r" $|$ "


class JakeResumeTemplate(ResumeTemplate):
    """Jake Gutierrez's ATS-friendly single-page resume.

    Sections always appear in the order heading, education, experience,
    projects, skills. A section with no entries keeps only its comment
    marker, since an empty ``itemize`` does not compile.
    """

    @property
    def name(self) -> str:  # pragma: no cover
        return "Jake's Resume"

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------

    def build(self, profile: Profile) -> Document:
        doc = self._create_document()
        self._add_heading(doc, profile)
        self._add_education(doc, profile.education)
        self._add_experience(doc, profile.work_experience)
        self._add_projects(doc, profile.projects)
        self._add_skills(doc, profile.skills)
        return doc

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------

    def _create_document(self) -> Document:
        doc = Document(
            documentclass="article",
            document_options=["letterpaper", "11pt"],
            page_numbers=True,  # Jake's preamble uses fancyhdr
            indent=True,  # Jake's preamble sets \raggedright
            lmodern=False,
            textcomp=False,
            microtype=False,
            fontenc=None,
            inputenc=None,
        )
        # Remove lastpage auto-injected by page_numbers=True;
        # Jake's preamble handles page style via fancyhdr.
        doc.packages = [p for p in doc.packages if "lastpage" not in p.dumps()]

        for pkg in _PACKAGES:
            doc.packages.append(pkg)
        doc.preamble.append(NoEscape(_PREAMBLE_SETUP))
        doc.preamble.append(NoEscape(_CUSTOM_COMMANDS))
        return doc

    @staticmethod
    def _item_list(items: list[str]) -> list[str]:
        if not items:
            return []
        return [r"\resumeItemListStart", *items, r"\resumeItemListEnd"]

    def _href(self, url: str) -> str:
        return rf"\href{{{self.escape_url(url)}}}{{{self.escape_latex(url)}}}"

    # -- heading -----------------------------------------------------------

    def _format_social_links(self, links: list[SocialLink]) -> list[str]:
        esc = self.escape_latex
        url = self.escape_url
        return [rf"\href{{{url(link.url)}}}{{{esc(link.platform)}}}" for link in links]

    def _add_heading(self, doc: Document, profile: Profile) -> None:
        esc = self.escape_latex
        name = esc(profile.name)

        parts: list[str] = []
        if profile.phone:
            parts.append(esc(profile.phone))
        if profile.email:
            mailto = self.escape_url(f"mailto:{profile.email}")
            parts.append(rf"\href{{{mailto}}}{{\underline{{{esc(profile.email)}}}}}")
        parts.extend(self._format_social_links(profile.social_links))

        lines = [
            "%----------HEADING----------",
            r"\begin{center}",
            rf"\textbf{{\Huge \scshape {name}}} \\ \vspace{{1pt}}",
        ]
        if parts:
            lines.append(rf"\small {_SEPARATOR.join(parts)}")
        lines.append(r"\end{center}")
        doc.append(NoEscape("\n".join(lines)))

    # -- education ---------------------------------------------------------

    def _add_education(self, doc: Document, entries: list[EducationEntry]) -> None:
        esc = self.escape_latex
        lines = ["%-----------EDUCATION-----------"]
        if entries:
            lines += [r"\section{Education}", r"\resumeSubHeadingListStart"]

        for entry in entries:
            institution = esc(entry.institution)
            degree = esc(entry.degree)
            if entry.field:
                degree = f"{degree}, {esc(entry.field)}"
            location = esc(entry.location or "")
            date_range = self.format_date_range(entry.start_date, entry.end_date)
            lines.append(
                rf"\resumeSubheading{{{institution}}}{{{location}}}{{{degree}}}{{{date_range}}}"
            )

            items: list[str] = []
            if entry.gpa is not None:
                items.append(rf"\resumeItem{{GPA: {entry.gpa:g}}}")
            if entry.description:
                items.append(rf"\resumeItem{{{esc(entry.description)}}}")
            lines += self._item_list(items)

        if entries:
            lines.append(r"\resumeSubHeadingListEnd")
        doc.append(NoEscape("\n".join(lines)))

    # -- experience --------------------------------------------------------

    def _add_experience(self, doc: Document, entries: list[WorkExperienceEntry]) -> None:
        esc = self.escape_latex
        lines = ["%-----------EXPERIENCE-----------"]
        if entries:
            lines += [r"\section{Experience}", r"\resumeSubHeadingListStart"]

        for entry in entries:
            position = esc(entry.position)
            company = esc(entry.company)
            location = esc(entry.location or "")
            date_range = self.format_date_range(entry.start_date, entry.end_date, entry.current)
            lines.append(
                rf"\resumeSubheading{{{position}}}{{{date_range}}}{{{company}}}{{{location}}}"
            )

            items = [rf"\resumeItem{{{esc(bullet)}}}" for bullet in entry.description]
            if entry.technologies:
                joined = ", ".join(esc(tech) for tech in entry.technologies)
                items.append(rf"\resumeItem{{Technologies: {joined}}}")
            lines += self._item_list(items)

        if entries:
            lines.append(r"\resumeSubHeadingListEnd")
        doc.append(NoEscape("\n".join(lines)))

    # -- projects ----------------------------------------------------------

    def _add_projects(self, doc: Document, entries: list[ProjectEntry]) -> None:
        esc = self.escape_latex
        lines = ["%-----------PROJECTS-----------"]
        if entries:
            lines += [r"\section{Projects}", r"\resumeSubHeadingListStart"]

        for entry in entries:
            heading_text = rf"\textbf{{{esc(entry.name)}}}"
            if entry.technologies:
                techs = ", ".join(esc(tech) for tech in entry.technologies)
                heading_text += rf"{_SEPARATOR}\emph{{{techs}}}"
            date_range = self.format_date_range(entry.start_date, entry.end_date)
            lines.append(rf"\resumeProjectHeading{{{heading_text}}}{{{date_range}}}")

            items = [rf"\resumeItem{{{esc(bullet)}}}" for bullet in entry.description]
            items += [rf"\resumeItem{{{esc(highlight)}}}" for highlight in entry.highlights]
            if entry.link:
                items.append(rf"\resumeItem{{Link: {self._href(entry.link)}}}")
            if entry.github_url:
                items.append(rf"\resumeItem{{GitHub: {self._href(entry.github_url)}}}")
            lines += self._item_list(items)

        if entries:
            lines.append(r"\resumeSubHeadingListEnd")
        doc.append(NoEscape("\n".join(lines)))

    # -- skills ------------------------------------------------------------

    def _add_skills(self, doc: Document, skills: list[str]) -> None:
        lines = ["%-----------PROGRAMMING SKILLS-----------"]
        if skills:
            joined = ", ".join(self.escape_latex(skill) for skill in skills)
            lines += [
                r"\section{Technical Skills}",
                r"\begin{itemize}[leftmargin=0.15in, label={}]",
                rf"\small{{\item{{\textbf{{Skills}}{{: {joined}}}}}}}",
                r"\end{itemize}",
            ]
        doc.append(NoEscape("\n".join(lines)))
