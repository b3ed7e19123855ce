import io

import pandas as pd
import openpyxl
from openpyxl.styles import Font as XFont, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from .credential import format_event_date, participation_count

COLUMNS = [("#",5),("Nome",30),("E-mail",34),("Empresa",24),("Participações",14)]
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

def participant_rows(participants) -> list:
    return [{"nome":          p.get("nome",""),
             "email":         p.get("email",""),
             "empresa":       p.get("empresa","") or "",
             "participacoes": participation_count(p) or 0}
            for p in participants or [] if isinstance(p, dict)]

def participants_frame(participants) -> pd.DataFrame:
    df = pd.DataFrame(participant_rows(participants),
                      columns=["nome","email","empresa","participacoes"])
    return df.rename(columns={"nome":"Nome","email":"E-mail",
                              "empresa":"Empresa","participacoes":"Participações"})

# ══════════════════════════════════════════════════════════════════
#  EXCEL REPORT
# ══════════════════════════════════════════════════════════════════
def build_excel(participants, event=None, tz_name="America/Sao_Paulo") -> bytes:
    event = event or {}
    rows  = participant_rows(participants)
    last  = get_column_letter(len(COLUMNS))

    wb=openpyxl.Workbook()
    hf=PatternFill("solid",fgColor="1F2937")
    hf2=PatternFill("solid",fgColor="111827")
    hfn=XFont(bold=True,color="FFFFFF",size=12)
    bdr=Border(bottom=Side(style="thin",color="374151"))
    ws=wb.active; ws.title="Participantes"

    ws.merge_cells(f"A1:{last}1"); t=ws["A1"]
    t.value=f"  {event.get('nome','Evento')} — Participantes"
    t.font=XFont(bold=True,color="ECEFF1",size=14); t.fill=hf2
    t.alignment=Alignment(horizontal="center",vertical="center")
    ws.row_dimensions[1].height=34

    ws.merge_cells(f"A2:{last}2"); info=ws["A2"]
    parts=[format_event_date(event.get("data"),tz_name), event.get("endereco",""), f"Total: {len(rows)}"]
    info.value=" | ".join(p for p in parts if p)
    info.font=XFont(color="D1D5DB",size=10); info.fill=hf
    info.alignment=Alignment(horizontal="center"); ws.row_dimensions[2].height=18

    for ci,(h,w) in enumerate(COLUMNS,1):
        cell=ws.cell(row=3,column=ci,value=h)
        cell.font=hfn; cell.fill=hf
        cell.alignment=Alignment(horizontal="center")
        ws.column_dimensions[get_column_letter(ci)].width=w
    ws.row_dimensions[3].height=22

    for ri,rec in enumerate(rows,4):
        alt=PatternFill("solid",fgColor="1F2937" if ri%2==0 else "273244")
        vals=[ri-3,rec["nome"],rec["email"],rec["empresa"],rec["participacoes"]]
        for ci,val in enumerate(vals,1):
            c=ws.cell(row=ri,column=ci,value=val)
            c.font=XFont(color="E5E7EB",size=11); c.fill=alt; c.border=bdr
            c.alignment=Alignment(horizontal="center" if ci in (1,5) else "left",vertical="center")
        ws.row_dimensions[ri].height=20

    buf=io.BytesIO(); wb.save(buf); return buf.getvalue()

def excel_name(event=None) -> str:
    nome = (event or {}).get("nome") or "evento"
    return f"participantes_{nome.replace(' ','_')}.xlsx"
